"""
User model for the Ticketing Service.
"""

from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, DateTime, Enum

from ticketing.models.base import Base, utcnow


class UserType(str, PyEnum):
    """Role a user registers with."""
    ORGANIZER = "organizer"
    ATTENDEE = "attendee"


class User(Base):
    """
    Registered user, either an event organizer or an attendee.
    Users are never deleted in-app.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    user_type = Column(Enum(UserType), nullable=False, default=UserType.ATTENDEE)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', user_type='{self.user_type}')>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_organizer(self) -> bool:
        return self.user_type == UserType.ORGANIZER
