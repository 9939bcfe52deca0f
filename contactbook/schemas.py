from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

#: Largest id or page number accepted from clients (signed 32-bit).
MAX_ID = 2**31 - 1


class RegisterUserRequest(BaseModel):
    """Payload for registering a new user."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=100)


class LoginUserRequest(BaseModel):
    """Credentials exchanged for a session token."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=100)


class UpdateUserRequest(BaseModel):
    """Profile changes; omitted fields are left untouched."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1, max_length=100)


class UserResponse(BaseModel):
    """Response schema for user data."""

    username: str
    name: str

    class Config:
        from_attributes = True


class TokenResponse(UserResponse):
    """User data returned on successful login."""

    token: str


class ContactBase(BaseModel):
    """Shared fields for contact schemas."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def email_length(cls, value):
        if value is not None and len(value) > 100:
            raise ValueError("email must be at most 100 characters")
        return value


class CreateContactRequest(ContactBase):
    """Schema for creating new contact."""

    pass


class UpdateContactRequest(ContactBase):
    """Schema for replacing contact fields.

    Only the fields present in the request body are written.
    """

    pass


class SearchContactRequest(BaseModel):
    """Filters and paging for contact search."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    page: int = Field(1, ge=1, le=MAX_ID)
    size: int = Field(10, ge=1, le=100)


class ContactResponse(BaseModel):
    """Schema for returning contact with ID."""

    id: int
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class Paging(BaseModel):
    current_page: int
    size: int
    total_page: int


class SearchContactResponse(BaseModel):
    """One page of contacts plus paging metadata."""

    data: List[ContactResponse]
    paging: Paging


class AddressBase(BaseModel):
    """Shared fields for address schemas."""

    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=10)


class CreateAddressRequest(AddressBase):
    """Schema for creating an address under a contact."""

    contact_id: int = Field(ge=1, le=MAX_ID)


class AddressRequest(AddressBase):
    """Address fields sent in request bodies (contact and id come from the path)."""

    pass


class AddressLookup(BaseModel):
    """Identifies one address under one contact."""

    contact_id: int = Field(ge=1, le=MAX_ID)
    address_id: int = Field(ge=1, le=MAX_ID)


class AddressResponse(BaseModel):
    """Schema for returning an address with ID."""

    id: int
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: str
    postal_code: str

    class Config:
        from_attributes = True
