"""
Security and Authentication

Handles password hashing, bearer token creation/validation and the
admin-status guard used before user updates.
"""

from typing import Optional, Dict, Any, Mapping
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext
from jose import JWTError, jwt

from jobly.core.config import get_settings
from jobly.core.exceptions import UnauthorizedException
from jobly.utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)

# Get settings
settings = get_settings()


class SecurityManager:
    """Security and authentication manager."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        work_factor: Optional[int] = None
    ) -> None:
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.access_token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=work_factor or settings.BCRYPT_WORK_FACTOR
        )

    def hash_password(self, password: str) -> str:
        """
        Hash password using bcrypt.

        Every call draws a fresh salt, so equal passwords never share a hash.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password

        Returns:
            bool: True if password matches
        """
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Malformed or unknown hash in storage
            logger.warning("Stored password hash could not be verified")
            return False

    def create_access_token(
        self,
        user: Mapping[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create the bearer token handed out after login or registration.

        Args:
            user: User data; ``username`` and ``isAdmin`` are encoded
            expires_delta: Token lifetime, defaults to the configured one

        Returns:
            str: Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        to_encode = {
            "username": user["username"],
            "isAdmin": bool(user.get("isAdmin", False)),
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a bearer token.

        Raises:
            UnauthorizedException: If the token is invalid or expired
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification error: {e}")
            raise UnauthorizedException("Invalid token")

    @staticmethod
    def ensure_can_change_admin(
        current_user: Optional[Mapping[str, Any]],
        data: Mapping[str, Any]
    ) -> None:
        """
        Reject an ``isAdmin`` change requested by a non-admin caller.

        UserRepository.update performs no caller checks; whoever accepts the
        update request must call this first.

        Raises:
            UnauthorizedException: If ``data`` touches ``isAdmin`` and the
                caller is not an admin
        """
        if "isAdmin" not in data:
            return
        if not current_user or not current_user.get("isAdmin"):
            raise UnauthorizedException("Cannot change admin status")


# Global security manager instance
security_manager = SecurityManager()
