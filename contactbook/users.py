"""User-related routes: registration, login, profile and logout."""

import logging

from fastapi import APIRouter, Depends
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.orm import Session

from . import schemas
from .auth import get_current_user
from .core import get_settings
from .database import get_db
from .models import User
from .services import UserService

router = APIRouter(prefix="/api/users", tags=["users"])
settings = get_settings()

rate_limit = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db, logging.getLogger("contactbook.users"))


@router.post(
    "",
    response_model=schemas.UserResponse,
    dependencies=[Depends(rate_limit)],
)
def register(
    request: schemas.RegisterUserRequest,
    service: UserService = Depends(get_user_service),
):
    """
    Register a new user.

    Args:
        request (RegisterUserRequest): Username, password and display name.
        service (UserService): User service bound to the request session.

    Returns:
        UserResponse: The registered username and name.
    """
    return service.register(request)


@router.post(
    "/login",
    response_model=schemas.TokenResponse,
    dependencies=[Depends(rate_limit)],
)
def login(
    request: schemas.LoginUserRequest,
    service: UserService = Depends(get_user_service),
):
    """Authenticate a user and return a new session token."""
    return service.login(request)


@router.get("/current", response_model=schemas.UserResponse)
def read_current(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """
    Retrieve details of the currently authenticated user.

    Args:
        current_user (User): Authenticated user obtained from the token.

    Returns:
        UserResponse: User profile information.
    """
    return service.get(current_user)


@router.patch("/current", response_model=schemas.UserResponse)
def update_current(
    request: schemas.UpdateUserRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Change the name and/or password of the authenticated user."""
    return service.update(current_user, request)


@router.delete("/current", response_model=schemas.UserResponse)
def logout(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Invalidate the session token of the authenticated user."""
    return service.logout(current_user)
