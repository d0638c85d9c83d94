"""
Session Use Case DTOs (Data Transfer Objects)

Built inside the unit of work so callers never touch ORM instances
after the transaction is closed.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel


class SessionInfo(BaseModel):
    """Public view of a remember-me session (token_value is never included)"""

    series: str
    token_date: date
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class IssuedToken(BaseModel):
    """Remember-me credential handed to the client after issuance or rotation"""

    series: str
    token_value: str
    token_date: date
    user_id: str
