"""Authentication service for JWT and password handling."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from src.config import Settings
from src.errors import InvalidTokenError
from src.models.user import User

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the time of a real verification when there is no user to check."""
    pwd_context.dummy_verify()


@dataclass(frozen=True)
class Identity:
    """Who a verified token says the caller is."""

    user_id: int
    email: str | None = None


class TokenService:
    """Issues and verifies signed bearer tokens.

    The secret is fixed for the life of the process; changing it invalidates
    every token issued before.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_minutes: int = 1440):
        self._secret = secret
        self.algorithm = algorithm
        self.expiration = timedelta(minutes=expiration_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expiration_minutes)

    def issue(self, user: User) -> str:
        """Create a JWT access token for a user."""
        now = datetime.now(UTC)
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": now + self.expiration,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """Decode and validate a token.

        Raises InvalidTokenError for malformed, forged and expired tokens alike.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError() from e

        user_id = payload.get("sub")
        if user_id is None or "exp" not in payload:
            raise InvalidTokenError()
        try:
            user_id = int(user_id)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError() from e

        email = payload.get("email")
        return Identity(user_id=user_id, email=email if isinstance(email, str) else None)
