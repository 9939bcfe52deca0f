"""CRUD operations for users, contacts and addresses.

This module contains database interaction logic, isolated from the
services and FastAPI route handlers. Functions here do not enforce
ownership or raise API errors; they only read and write rows.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from . import models


def count_users_by_username(db: Session, username: str) -> int:
    """Return the number of users registered under ``username``."""
    return db.scalar(
        select(func.count())
        .select_from(models.User)
        .where(models.User.username == username)
    )


def create_user(
    db: Session, username: str, name: str, hashed_password: str
) -> models.User:
    """
    Create and persist a new user without a session token.

    Args:
        db (Session): SQLAlchemy database session.
        username (str): Unique login name.
        name (str): Display name.
        hashed_password (str): Securely hashed password.

    Returns:
        User: Newly created user instance.
    """
    user = models.User(username=username, name=name, password=hashed_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_username(db: Session, username: str) -> models.User | None:
    """
    Retrieve a user by username.

    Args:
        db (Session): Database session.
        username (str): Username.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.username == username)
    ).scalar_one_or_none()


def get_user_by_token(db: Session, token: str) -> models.User | None:
    """Retrieve the user currently holding session ``token``."""
    return db.scalars(
        select(models.User).where(models.User.token == token).limit(1)
    ).first()


def update_user(db: Session, user: models.User, changes: dict) -> models.User:
    """
    Update columns of a user.

    Args:
        db (Session): Database session.
        user (User): Target user.
        changes (dict): Column values to write. ``None`` values are written
            as-is, which is how the session token is cleared.

    Returns:
        User: Updated user instance.
    """
    for key, value in changes.items():
        setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_contact(db: Session, data: dict, username: str) -> models.Contact:
    """
    Create a new contact owned by ``username``.

    Args:
        db (Session): Database session.
        data (dict): Contact column values.
        username (str): Owner of the contact.

    Returns:
        Contact: Newly created contact.
    """
    contact = models.Contact(**data, username=username)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def get_contact(db: Session, username: str, contact_id: int) -> models.Contact | None:
    """
    Retrieve a single contact owned by the given user.

    Args:
        db (Session): Database session.
        username (str): Contact owner.
        contact_id (int): Contact identifier.

    Returns:
        Contact | None: Contact if found, otherwise ``None``.
    """
    return db.execute(
        select(models.Contact).where(
            models.Contact.id == contact_id,
            models.Contact.username == username,
        )
    ).scalar_one_or_none()


def _contact_filters(
    username: str,
    name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
) -> list:
    filters = [models.Contact.username == username]
    if name:
        filters.append(
            or_(
                models.Contact.first_name.contains(name, autoescape=True),
                models.Contact.last_name.contains(name, autoescape=True),
            )
        )
    if email:
        filters.append(models.Contact.email.contains(email, autoescape=True))
    if phone:
        filters.append(models.Contact.phone.contains(phone, autoescape=True))
    return filters


def search_contacts(
    db: Session,
    username: str,
    skip: int = 0,
    limit: int = 10,
    name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
) -> list[models.Contact]:
    """
    Retrieve one page of contacts for the given user.

    ``name`` matches either the first or the last name. All given filters
    must match.

    Args:
        db (Session): Database session.
        username (str): Contact owner.
        skip (int): Number of records to skip.
        limit (int): Maximum number of records to return.
        name (str | None): Substring of first or last name.
        email (str | None): Substring of email.
        phone (str | None): Substring of phone.

    Returns:
        list[Contact]: List of contacts.
    """
    stmt = (
        select(models.Contact)
        .where(*_contact_filters(username, name, email, phone))
        .order_by(models.Contact.id)
        .offset(skip)
        .limit(limit)
    )
    return list(db.scalars(stmt).all())


def count_contacts(
    db: Session,
    username: str,
    name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
) -> int:
    """Count every contact matching the same filters as :func:`search_contacts`."""
    stmt = (
        select(func.count())
        .select_from(models.Contact)
        .where(*_contact_filters(username, name, email, phone))
    )
    return db.scalar(stmt)


def update_contact(db: Session, contact: models.Contact, changes: dict):
    """
    Update mutable fields of a contact.

    Args:
        db (Session): Database session.
        contact (Contact): Contact instance.
        changes (dict): Fields to update.

    Returns:
        Contact: Updated contact.
    """
    for key, value in changes.items():
        setattr(contact, key, value)

    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, contact: models.Contact):
    """
    Delete a contact and its addresses from the database.

    Args:
        db (Session): Database session.
        contact (Contact): Contact to delete.
    """
    db.delete(contact)
    db.commit()
    return None


def create_address(db: Session, data: dict) -> models.Address:
    """
    Create a new address.

    Args:
        db (Session): Database session.
        data (dict): Address column values including ``contact_id``.

    Returns:
        Address: Newly created address.
    """
    address = models.Address(**data)
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def get_address(db: Session, contact_id: int, address_id: int) -> models.Address | None:
    """Retrieve an address only if it belongs to ``contact_id``."""
    return db.execute(
        select(models.Address).where(
            models.Address.id == address_id,
            models.Address.contact_id == contact_id,
        )
    ).scalar_one_or_none()


def list_addresses(db: Session, contact_id: int) -> list[models.Address]:
    """Return every address of a contact."""
    return list(
        db.scalars(
            select(models.Address).where(models.Address.contact_id == contact_id)
        ).all()
    )


def update_address(db: Session, address: models.Address, changes: dict):
    """Write ``changes`` onto ``address`` and return the refreshed row."""
    for key, value in changes.items():
        setattr(address, key, value)

    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def delete_address(db: Session, address: models.Address):
    db.delete(address)
    db.commit()
    return None
