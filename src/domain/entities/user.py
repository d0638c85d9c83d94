"""
User Entity

Account that owns remember-me sessions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class User(SQLModel, table=True):
    """
    User entity - account identified by its login.

    Business Rules:
    - Login is unique and stored lowercase
    - Email must be unique across all users
    - Password stored as bcrypt hash
    - Only activated users may authenticate
    - reset_key/reset_date belong to the password reset flow
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    login: str = Field(unique=True, index=True, max_length=50)
    email: str = Field(unique=True, index=True, max_length=254)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    activated: bool = Field(default=False)
    activation_key: Optional[str] = Field(default=None, max_length=20)

    reset_key: Optional[str] = Field(default=None, max_length=20)
    reset_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_activated", "activated"),)
