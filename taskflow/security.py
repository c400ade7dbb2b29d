"""Password hashing and signed identity tokens."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from taskflow.errors import InvalidToken

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


class PasswordHasher:
    """One-way salted password hashes (bcrypt)."""

    def __init__(self, rounds: int = 12):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_hash = None

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # unrecognised or corrupt hash
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend one verification when there is no stored hash to check.

        Keeps unknown-user logins as slow as wrong-password logins.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("taskflow-unknown-user")
        self.pwd_context.verify(password, self._dummy_hash)


class TokenService:
    """Issues and verifies stateless HS256 tokens carrying a user id."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)

    def issue(self, user_id: int, now: datetime = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "id": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Return the user id in ``token`` or raise InvalidToken.

        Bad signatures, malformed tokens, expired tokens and payloads without
        an integer ``id`` all raise the same error.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidToken()
        except (TypeError, ValueError, AttributeError) as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidToken()

        user_id = payload.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise InvalidToken()
        return user_id
