"""Business logic for users, contacts and addresses.

Each service holds a database session and a logger handed to it by the
caller. Every operation validates its input first, then walks the
ownership chain (user owns contact owns address) and only then touches
the store. A row owned by someone else is reported exactly like a
missing one.
"""

import logging
import math

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .auth import generate_token, get_password_hash, verify_password
from .errors import ConflictError, NotFoundError, UnauthorizedError
from .validation import validate


def check_contact_must_exist(
    db: Session, username: str, contact_id: int
) -> models.Contact:
    """
    Return the contact ``contact_id`` if ``username`` owns it.

    Raises:
        NotFoundError: If the contact does not exist or has another owner.
    """
    contact = crud.get_contact(db, username, contact_id)
    if contact is None:
        raise NotFoundError("Contact is not found")
    return contact


def check_address_must_exist(
    db: Session, contact_id: int, address_id: int
) -> models.Address:
    """
    Return the address ``address_id`` if it belongs to ``contact_id``.

    Raises:
        NotFoundError: If the address does not exist under that contact.
    """
    address = crud.get_address(db, contact_id, address_id)
    if address is None:
        raise NotFoundError("Address is not found")
    return address


def to_user_response(user: models.User) -> schemas.UserResponse:
    return schemas.UserResponse(username=user.username, name=user.name)


def to_contact_response(contact: models.Contact) -> schemas.ContactResponse:
    return schemas.ContactResponse.model_validate(contact)


def to_address_response(address: models.Address) -> schemas.AddressResponse:
    return schemas.AddressResponse.model_validate(address)


class UserService:
    """Registration, login, logout and profile management."""

    def __init__(self, db: Session, logger: logging.Logger):
        self.db = db
        self.logger = logger

    def register(self, request) -> schemas.UserResponse:
        """
        Register a new user.

        Args:
            request (RegisterUserRequest | dict): Username, password and name.

        Raises:
            ValidationError: If the payload is malformed.
            ConflictError: If the username is already taken.

        Returns:
            UserResponse: The stored username and name.
        """
        data = validate(schemas.RegisterUserRequest, request)
        self.logger.debug("UserService.register(username=%s)", data.username)

        if crud.count_users_by_username(self.db, data.username) != 0:
            self.logger.info("Rejected duplicate username %s", data.username)
            raise ConflictError("Username already exists")

        try:
            user = crud.create_user(
                self.db,
                username=data.username,
                name=data.name,
                hashed_password=get_password_hash(data.password),
            )
        except IntegrityError as exc:
            # Another request registered the same username after the count.
            self.db.rollback()
            self.logger.info("Rejected duplicate username %s", data.username)
            raise ConflictError("Username already exists") from exc
        return to_user_response(user)

    def login(self, request) -> schemas.TokenResponse:
        """
        Exchange credentials for a fresh session token.

        The previous token of the user, if any, stops working.

        Raises:
            ValidationError: If the payload is malformed.
            UnauthorizedError: If the username is unknown or the password
                is wrong. Both cases carry the same message.
        """
        data = validate(schemas.LoginUserRequest, request)
        self.logger.debug("UserService.login(username=%s)", data.username)

        user = crud.get_user_by_username(self.db, data.username)
        if user is None or not verify_password(data.password, user.password):
            self.logger.info("Failed login for %s", data.username)
            raise UnauthorizedError("Username or password is invalid")

        user = crud.update_user(self.db, user, {"token": generate_token()})
        return schemas.TokenResponse(
            username=user.username, name=user.name, token=user.token
        )

    def get(self, user: models.User) -> schemas.UserResponse:
        return to_user_response(user)

    def update(self, user: models.User, request) -> schemas.UserResponse:
        """
        Change the name and/or password of ``user``.

        Fields missing from the request keep their stored value.
        """
        data = validate(schemas.UpdateUserRequest, request)
        self.logger.debug(
            "UserService.update(username=%s, fields=%s)",
            user.username,
            sorted(data.model_fields_set),
        )

        changes = {}
        if data.name:
            changes["name"] = data.name
        if data.password:
            changes["password"] = get_password_hash(data.password)

        user = crud.update_user(self.db, user, changes)
        return to_user_response(user)

    def logout(self, user: models.User) -> schemas.UserResponse:
        """Clear the session token of ``user``; nothing else changes."""
        self.logger.debug("UserService.logout(username=%s)", user.username)
        user = crud.update_user(self.db, user, {"token": None})
        return to_user_response(user)


class ContactService:
    """Contacts scoped to their owning user."""

    def __init__(self, db: Session, logger: logging.Logger):
        self.db = db
        self.logger = logger

    def check_contact_must_exist(self, username: str, contact_id: int) -> models.Contact:
        return check_contact_must_exist(self.db, username, contact_id)

    def create(self, user: models.User, request) -> schemas.ContactResponse:
        """
        Create a contact owned by ``user``.

        Args:
            user (User): Authenticated user.
            request (CreateContactRequest | dict): Contact fields.

        Returns:
            ContactResponse: Created contact.
        """
        data = validate(schemas.CreateContactRequest, request)
        self.logger.debug("ContactService.create(username=%s)", user.username)
        contact = crud.create_contact(self.db, data.model_dump(), user.username)
        return to_contact_response(contact)

    def get(self, user: models.User, contact_id: int) -> schemas.ContactResponse:
        contact = self.check_contact_must_exist(user.username, contact_id)
        return to_contact_response(contact)

    def update(
        self, user: models.User, contact_id: int, request
    ) -> schemas.ContactResponse:
        """
        Update a contact of ``user``.

        Only fields explicitly present in ``request`` are written.

        Raises:
            ValidationError: If the payload is malformed.
            NotFoundError: If the contact is missing or not owned by ``user``.
        """
        data = validate(schemas.UpdateContactRequest, request)
        self.logger.debug(
            "ContactService.update(username=%s, contact_id=%s)",
            user.username,
            contact_id,
        )
        contact = self.check_contact_must_exist(user.username, contact_id)
        contact = crud.update_contact(
            self.db, contact, data.model_dump(exclude_unset=True)
        )
        return to_contact_response(contact)

    def remove(self, user: models.User, contact_id: int) -> schemas.ContactResponse:
        """Delete a contact of ``user`` together with its addresses."""
        self.logger.debug(
            "ContactService.remove(username=%s, contact_id=%s)",
            user.username,
            contact_id,
        )
        contact = self.check_contact_must_exist(user.username, contact_id)
        response = to_contact_response(contact)
        crud.delete_contact(self.db, contact)
        return response

    def search(self, user: models.User, request) -> schemas.SearchContactResponse:
        """
        Return one page of the contacts of ``user`` matching the filters.

        ``name`` matches the first or the last name, ``email`` and ``phone``
        match their own column, all by substring. ``total_page`` is computed
        from a count over every matching row, not just the returned page.

        Args:
            user (User): Authenticated user.
            request (SearchContactRequest | dict): Filters, ``page`` and ``size``.

        Raises:
            ValidationError: If ``page`` or ``size`` is out of range.

        Returns:
            SearchContactResponse: Page data and paging metadata.
        """
        data = validate(schemas.SearchContactRequest, request)
        self.logger.debug(
            "ContactService.search(username=%s, page=%s, size=%s)",
            user.username,
            data.page,
            data.size,
        )
        filters = {"name": data.name, "email": data.email, "phone": data.phone}

        contacts = crud.search_contacts(
            self.db,
            user.username,
            skip=(data.page - 1) * data.size,
            limit=data.size,
            **filters,
        )
        total = crud.count_contacts(self.db, user.username, **filters)

        return schemas.SearchContactResponse(
            data=[to_contact_response(contact) for contact in contacts],
            paging=schemas.Paging(
                current_page=data.page,
                size=data.size,
                total_page=math.ceil(total / data.size),
            ),
        )


class AddressService:
    """Addresses scoped to a contact of the authenticated user."""

    def __init__(
        self, db: Session, logger: logging.Logger, contact_service: ContactService
    ):
        self.db = db
        self.logger = logger
        self.contact_service = contact_service

    def check_address_must_exist(self, contact_id: int, address_id: int) -> models.Address:
        return check_address_must_exist(self.db, contact_id, address_id)

    def _lookup(self, user: models.User, contact_id: int, address_id: int) -> models.Address:
        lookup = validate(
            schemas.AddressLookup, {"contact_id": contact_id, "address_id": address_id}
        )
        self.contact_service.check_contact_must_exist(user.username, lookup.contact_id)
        return self.check_address_must_exist(lookup.contact_id, lookup.address_id)

    def create(self, user: models.User, request) -> schemas.AddressResponse:
        """
        Add an address to a contact of ``user``.

        Args:
            user (User): Authenticated user.
            request (CreateAddressRequest | dict): Address fields and ``contact_id``.

        Raises:
            ValidationError: If the payload is malformed.
            NotFoundError: If the contact is missing or not owned by ``user``.

        Returns:
            AddressResponse: Created address.
        """
        data = validate(schemas.CreateAddressRequest, request)
        self.logger.debug(
            "AddressService.create(username=%s, contact_id=%s)",
            user.username,
            data.contact_id,
        )
        self.contact_service.check_contact_must_exist(user.username, data.contact_id)
        address = crud.create_address(self.db, data.model_dump())
        return to_address_response(address)

    def get(
        self, user: models.User, contact_id: int, address_id: int
    ) -> schemas.AddressResponse:
        address = self._lookup(user, contact_id, address_id)
        return to_address_response(address)

    def update(
        self, user: models.User, contact_id: int, address_id: int, request
    ) -> schemas.AddressResponse:
        """Update an address; only fields present in ``request`` are written."""
        data = validate(schemas.AddressRequest, request)
        self.logger.debug(
            "AddressService.update(username=%s, contact_id=%s, address_id=%s)",
            user.username,
            contact_id,
            address_id,
        )
        address = self._lookup(user, contact_id, address_id)
        address = crud.update_address(
            self.db, address, data.model_dump(exclude_unset=True)
        )
        return to_address_response(address)

    def remove(
        self, user: models.User, contact_id: int, address_id: int
    ) -> schemas.AddressResponse:
        self.logger.debug(
            "AddressService.remove(username=%s, contact_id=%s, address_id=%s)",
            user.username,
            contact_id,
            address_id,
        )
        address = self._lookup(user, contact_id, address_id)
        response = to_address_response(address)
        crud.delete_address(self.db, address)
        return response

    def list(self, user: models.User, contact_id: int) -> list[schemas.AddressResponse]:
        contact = self.contact_service.check_contact_must_exist(user.username, contact_id)
        return [
            to_address_response(address)
            for address in crud.list_addresses(self.db, contact.id)
        ]
