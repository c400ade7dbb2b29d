"""Credential store: registration and login."""

import logging
from typing import Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskflow.errors import DuplicateUser, InvalidCredentials, StoreError
from taskflow.models import User as DBUser
from taskflow.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, hasher: PasswordHasher, tokens: TokenService):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    def register(self, username: str, email: str, password: str) -> Tuple[DBUser, str]:
        """Create a user and return it with a freshly issued token.

        Raises DuplicateUser if the username or the email is already taken.
        Input shape is validated by the request schema before this is called.
        """
        try:
            existing = (
                self.db.query(DBUser)
                .filter(or_(DBUser.email == email, DBUser.username == username))
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to register user: {e}")
        if existing:
            raise DuplicateUser()

        db_user = DBUser(
            username=username,
            email=email,
            hashed_password=self.hasher.hash(password),
        )
        try:
            self.db.add(db_user)
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration
            self.db.rollback()
            raise DuplicateUser()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to register user: {e}")
        self.db.refresh(db_user)

        logger.info("Registered user id=%s username=%s", db_user.id, db_user.username)
        return db_user, self.tokens.issue(db_user.id)

    def authenticate(self, email: str, password: str) -> DBUser:
        try:
            user = self.db.query(DBUser).filter(DBUser.email == email).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to log in: {e}")

        if user is None:
            self.hasher.verify_dummy(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.hashed_password):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            raise InvalidCredentials()
        return user

    def login(self, email: str, password: str) -> Tuple[DBUser, str]:
        """Check credentials and issue a new token.

        Unknown email and wrong password raise the same InvalidCredentials.
        """
        user = self.authenticate(email, password)
        return user, self.tokens.issue(user.id)

