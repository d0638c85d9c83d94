"""
Use Cases

Organized into domain folders:
- auth/: Password and remember-me login
- sessions/: Remember-me token lifecycle
"""

from .auth import (
    AuthenticateCommand,
    AuthenticateResponse,
    AuthenticateUseCase,
)
from .sessions import (
    IssuedToken,
    SessionInfo,
    SessionLifecycleManager,
)

__all__ = [
    # Auth
    "AuthenticateCommand",
    "AuthenticateResponse",
    "AuthenticateUseCase",
    # Sessions
    "IssuedToken",
    "SessionInfo",
    "SessionLifecycleManager",
]
