"""Authentication helpers: password hashing, session tokens and the route guard."""

import uuid

from fastapi import Depends
from fastapi.security import APIKeyHeader
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import crud
from .database import get_db
from .errors import UnauthorizedError
from .models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
token_header = APIKeyHeader(name="Authorization", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain password with its hashed value."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a password hash using the configured context."""
    return pwd_context.hash(password)


def generate_token() -> str:
    """Create a new opaque session token."""
    return str(uuid.uuid4())


def resolve_principal(db: Session, authorization: str | None) -> User | None:
    """
    Find the user a request is authenticated as.

    Both a bare token and the ``Bearer <token>`` form are accepted.

    Args:
        db (Session): Database session.
        authorization (str | None): Raw ``Authorization`` header value.

    Returns:
        User | None: The token holder, or ``None`` when the header is
        missing or the token is unknown.
    """
    if not authorization:
        return None
    token = authorization.strip()
    scheme, _, credentials = token.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        token = credentials.strip()
    if not token:
        return None
    return crud.get_user_by_token(db, token)


def get_optional_user(
    authorization: str | None = Depends(token_header), db: Session = Depends(get_db)
) -> User | None:
    """Dependency that attaches the principal when the request carries a valid token."""
    return resolve_principal(db, authorization)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Dependency that rejects requests without a resolved principal."""
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user
