"""
Session Use Cases

Remember-me token lifecycle.
"""

from .dtos import IssuedToken, SessionInfo
from .session_lifecycle_manager import DEFAULT_RETENTION_DAYS, SessionLifecycleManager

__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "IssuedToken",
    "SessionInfo",
    "SessionLifecycleManager",
]
