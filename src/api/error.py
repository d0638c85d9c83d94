from typing import Dict, Optional

from fastapi import status
from src.app.result import Error

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class ClientError(Exception):
    """Business error surfaced to the client with a 4xx status"""

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    """Unexpected error code; details are logged, not returned"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)
