"""
Session Service Domain Entities

Each entity in its own file.
"""

from .user import User
from .persistent_token import PersistentToken

__all__ = [
    "User",
    "PersistentToken",
]
