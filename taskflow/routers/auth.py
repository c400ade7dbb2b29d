from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from slowapi import Limiter
from sqlalchemy.orm import Session

from taskflow import schemas
from taskflow.auth import get_password_hasher, get_token_service
from taskflow.database import get_db
from taskflow.security import PasswordHasher, TokenService
from taskflow.users import UserService


def get_user_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(db, hasher, tokens)


def create_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """Auth routes rate limited by ``limiter``; built once per app."""
    router = APIRouter(prefix="/api/auth", tags=["Auth"])

    @router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
    @limiter.limit(rate_limit)
    def register(
        request: Request,
        user: schemas.UserCreate,
        users: UserService = Depends(get_user_service),
    ):
        db_user, token = users.register(user.username, user.email, user.password)
        return {
            "message": "User registered successfully",
            "user": schemas.User.model_validate(db_user),
            "token": token,
        }

    @router.post("/login", response_model=schemas.AuthResponse)
    @limiter.limit(rate_limit)
    def login(
        request: Request,
        credentials: schemas.UserLogin,
        users: UserService = Depends(get_user_service),
    ):
        db_user, token = users.login(credentials.email, credentials.password)
        return {
            "message": "Login successful",
            "user": schemas.User.model_validate(db_user),
            "token": token,
        }

    @router.post("/token", response_model=schemas.Token)
    @limiter.limit(rate_limit)
    def token(
        request: Request,
        form_data: OAuth2PasswordRequestForm = Depends(),
        users: UserService = Depends(get_user_service),
    ):
        # OAuth2 password flow for the interactive docs; "username" carries the email
        _, access_token = users.login(form_data.username, form_data.password)
        return {"access_token": access_token, "token_type": "bearer"}

    return router
