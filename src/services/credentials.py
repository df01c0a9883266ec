"""Credential store: user records and password checks."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.errors import ConflictError, StoreError
from src.models.user import User
from src.services.auth import dummy_verify, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class CredentialStore:
    """Service for user accounts."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, name: str, email: str, password: str) -> User:
        """Create a new user.

        Email uniqueness is enforced by the unique index on ``users.email``;
        when two signups race, the losing insert fails here with ConflictError.
        """
        user = User(name=name, email=email, password_hash=get_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("A user with this email already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to create user {email}")
            raise StoreError() from e

        self.db.refresh(user)
        logger.info(f"New user created: {user.email} (id={user.id})")
        return user

    def find_user_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.exception("Failed to look up user by email")
            raise StoreError() from e

    def find_user_by_id(self, user_id: int) -> User | None:
        """Get a user by id."""
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to look up user {user_id}")
            raise StoreError() from e

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user if the password matches, otherwise None.

        An unknown email still pays for one hash verification, so response
        time does not reveal whether the account exists.
        """
        user = self.find_user_by_email(email)
        if user is None:
            dummy_verify()
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user
