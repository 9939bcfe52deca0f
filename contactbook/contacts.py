"""Contact management routes for the Contacts API."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from . import schemas
from .auth import get_current_user
from .database import get_db
from .models import User
from .services import ContactService

router = APIRouter(prefix="/api/contacts", tags=["contacts"])

ContactId = Annotated[int, Path(ge=1, le=schemas.MAX_ID)]


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db, logging.getLogger("contactbook.contacts"))


@router.post("", response_model=schemas.ContactResponse)
def create_contact(
    request: schemas.CreateContactRequest,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """
    Create a new contact owned by the current user.

    Args:
        request (CreateContactRequest): Contact input data.
        current_user (User): Authenticated user.
        service (ContactService): Contact service bound to the request session.

    Returns:
        ContactResponse: Created contact.
    """
    return service.create(current_user, request)


@router.get("", response_model=schemas.SearchContactResponse)
def search_contacts(
    name: str | None = Query(None),
    email: str | None = Query(None),
    phone: str | None = Query(None),
    page: int = 1,
    size: int = 10,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """
    Search contacts belonging to the current user.

    ``name`` matches the first or last name; ``email`` and ``phone``
    match their own field. Results are paginated with ``page`` and ``size``.

    Returns:
        SearchContactResponse: Matching contacts and paging metadata.
    """
    request = {"page": page, "size": size}
    for key, value in (("name", name), ("email", email), ("phone", phone)):
        if value is not None:
            request[key] = value
    return service.search(current_user, request)


@router.get("/{contact_id}", response_model=schemas.ContactResponse)
def get_contact(
    contact_id: ContactId,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """
    Retrieve a single contact by ID for the current user.

    Raises:
        NotFoundError: If contact is not found.
    """
    return service.get(current_user, contact_id)


@router.put("/{contact_id}", response_model=schemas.ContactResponse)
def update_contact(
    contact_id: ContactId,
    request: schemas.UpdateContactRequest,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """
    Update an existing contact.

    Only fields provided in the request body are written.
    """
    return service.update(current_user, contact_id, request)


@router.delete("/{contact_id}", response_model=schemas.ContactResponse)
def remove_contact(
    contact_id: ContactId,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """Delete a contact owned by the current user and return it."""
    return service.remove(current_user, contact_id)
