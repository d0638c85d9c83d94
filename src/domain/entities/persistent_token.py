"""
Persistent Token Entity

Stores remember-me login tokens.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import Date
from sqlmodel import Column, Field, Index, SQLModel

USER_AGENT_MAX_LENGTH = 255


class PersistentToken(SQLModel, table=True):
    """
    Persistent token entity - one row per remember-me login session.

    Business Rules:
    - series is the primary key, generated at issuance and never reused
    - token_value is rotated on every successful remember-me login
    - token_date is refreshed on every rotation
    - Tokens not refreshed for 31 days are expired and purged
    - token_value is never exposed to clients
    """

    __tablename__ = "persistent_tokens"

    series: str = Field(primary_key=True, max_length=64)
    token_value: str = Field(max_length=64)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    token_date: date = Field(default_factory=date.today, sa_column=Column(Date, nullable=False))

    # Audit
    ip_address: Optional[str] = Field(default=None, max_length=39)
    user_agent: Optional[str] = Field(default=None, max_length=USER_AGENT_MAX_LENGTH)

    __table_args__ = (Index("idx_persistent_token_date", "token_date"),)
