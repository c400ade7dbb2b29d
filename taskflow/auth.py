"""Auth gateway: resolves the bearer token on every task route."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from taskflow.errors import AuthenticationRequired, InvalidToken
from taskflow.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

# auto_error=False so a missing header goes through our own error shape
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, threaded into handlers by FastAPI."""

    user_id: int


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_identity(
    token: Optional[str] = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    if not token:
        raise AuthenticationRequired()
    try:
        user_id = tokens.verify(token)
    except InvalidToken:
        logger.info("Rejected request with invalid bearer token")
        raise
    return Identity(user_id=user_id)
