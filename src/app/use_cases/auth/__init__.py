"""
Authentication Use Cases
"""

from .dtos import AuthenticateCommand, AuthenticateResponse
from .authenticate_use_case import AuthenticateUseCase

__all__ = [
    "AuthenticateCommand",
    "AuthenticateResponse",
    "AuthenticateUseCase",
]
