"""
SQL helpers for partial updates.
"""

from typing import Any, Collection, List, Mapping, NamedTuple, Optional
import re

from jobly.core.exceptions import BadRequestException

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PartialUpdate(NamedTuple):
    """``SET`` clause body and the values for its placeholders."""
    set_cols: str
    values: List[Any]


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    column_map: Optional[Mapping[str, str]] = None,
    allowed_fields: Optional[Collection[str]] = None
) -> PartialUpdate:
    """
    Build the ``SET`` part of an UPDATE from a sparse dict of changes.

    Only the fields present in ``data_to_update`` are set. Placeholders are
    numbered from ``$1`` in the dict's insertion order, so a caller appends
    its lookup key as ``$len(values) + 1``.

        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                        {"firstName": "first_name"})
        PartialUpdate(set_cols='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Args:
        data_to_update: Field name -> new value
        column_map: Field name -> storage column, for names that differ
        allowed_fields: Fields the caller may update; others are rejected

    Raises:
        BadRequestException: If there is nothing to update, a field is not in
            ``allowed_fields``, or a name is not a plain identifier
    """
    keys = list(data_to_update)
    if not keys:
        raise BadRequestException("No data")

    if allowed_fields is not None:
        rejected = [key for key in keys if key not in allowed_fields]
        if rejected:
            raise BadRequestException(f"Cannot update fields: {', '.join(rejected)}")

    column_map = column_map or {}
    columns = [column_map.get(key, key) for key in keys]

    bad_names = [column for column in columns if not _IDENTIFIER.match(column)]
    if bad_names:
        raise BadRequestException(f"Invalid field names: {', '.join(bad_names)}")

    set_cols = ", ".join(
        f'"{column}"=${idx}' for idx, column in enumerate(columns, start=1)
    )
    return PartialUpdate(set_cols, [data_to_update[key] for key in keys])
