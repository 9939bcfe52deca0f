"""Address routes nested under a contact."""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from . import schemas
from .auth import get_current_user
from .contacts import ContactId, get_contact_service
from .database import get_db
from .models import User
from .services import AddressService, ContactService

router = APIRouter(prefix="/api/contacts/{contact_id}/addresses", tags=["addresses"])

AddressId = Annotated[int, Path(ge=1, le=schemas.MAX_ID)]


def get_address_service(
    db: Session = Depends(get_db),
    contact_service: ContactService = Depends(get_contact_service),
) -> AddressService:
    return AddressService(db, logging.getLogger("contactbook.addresses"), contact_service)


@router.post("", response_model=schemas.AddressResponse)
def create_address(
    contact_id: ContactId,
    request: schemas.AddressRequest,
    current_user: User = Depends(get_current_user),
    service: AddressService = Depends(get_address_service),
):
    """
    Add an address to a contact of the current user.

    Args:
        contact_id (int): Owning contact.
        request (AddressRequest): Address fields.
        current_user (User): Authenticated user.
        service (AddressService): Address service bound to the request session.

    Returns:
        AddressResponse: Created address.
    """
    payload = request.model_dump(exclude_unset=True)
    payload["contact_id"] = contact_id
    return service.create(current_user, payload)


@router.get("", response_model=List[schemas.AddressResponse])
def list_addresses(
    contact_id: ContactId,
    current_user: User = Depends(get_current_user),
    service: AddressService = Depends(get_address_service),
):
    """Return every address of a contact of the current user."""
    return service.list(current_user, contact_id)


@router.get("/{address_id}", response_model=schemas.AddressResponse)
def get_address(
    contact_id: ContactId,
    address_id: AddressId,
    current_user: User = Depends(get_current_user),
    service: AddressService = Depends(get_address_service),
):
    return service.get(current_user, contact_id, address_id)


@router.put("/{address_id}", response_model=schemas.AddressResponse)
def update_address(
    contact_id: ContactId,
    address_id: AddressId,
    request: schemas.AddressRequest,
    current_user: User = Depends(get_current_user),
    service: AddressService = Depends(get_address_service),
):
    """Update an address; only fields present in the body are written."""
    return service.update(current_user, contact_id, address_id, request)


@router.delete("/{address_id}", response_model=schemas.AddressResponse)
def remove_address(
    contact_id: ContactId,
    address_id: AddressId,
    current_user: User = Depends(get_current_user),
    service: AddressService = Depends(get_address_service),
):
    """Delete an address and return it."""
    return service.remove(current_user, contact_id, address_id)
