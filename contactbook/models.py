"""Database models for the Contacts API.

Users own contacts and contacts own addresses. Deleting a row removes
everything below it in that chain.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from .database import Base


class User(Base):
    """
    SQLAlchemy model representing an application user.

    ``token`` holds the opaque session identifier issued on login and is
    ``None`` while the user is logged out.
    """

    __tablename__ = "users"

    username = Column(String(100), primary_key=True)
    name = Column(String(100), nullable=False)
    password = Column(String(255), nullable=False)
    token = Column(String(100), nullable=True, index=True)

    #: List of contacts owned by the user
    contacts = relationship(
        "Contact",
        back_populates="owner",
        cascade="all, delete-orphan",
    )


class Contact(Base):
    """SQLAlchemy model representing a contact entry owned by one user."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)

    #: Username of the owning user
    username = Column(
        String(100),
        ForeignKey("users.username", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="contacts")
    addresses = relationship(
        "Address",
        back_populates="contact",
        cascade="all, delete-orphan",
    )


class Address(Base):
    """SQLAlchemy model representing a postal address of a contact."""

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    street = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False)
    postal_code = Column(String(10), nullable=False)

    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    contact = relationship("Contact", back_populates="addresses")
