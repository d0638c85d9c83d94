"""
Authentication Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional
from pydantic import BaseModel


class AuthenticateCommand(BaseModel):
    """Password login intent"""

    login: str
    password: str
    remember_me: bool = False
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuthenticateResponse(BaseModel):
    """Response for password and remember-me login"""

    access_token: str
    token_type: str = "bearer"
    remember_me_token: Optional[str] = None
