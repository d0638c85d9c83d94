"""
Remember-me credential encoding.

The client holds ``series:token_value`` encoded as URL-safe base64.
"""

import base64
import binascii
from typing import Optional, Tuple

DELIMITER = ":"


def encode_remember_me_token(series: str, token_value: str) -> str:
    raw = f"{series}{DELIMITER}{token_value}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_remember_me_token(value: str) -> Optional[Tuple[str, str]]:
    """
    Decode a remember-me credential.

    Returns:
        (series, token_value), or None when the value is malformed
    """
    try:
        raw = base64.urlsafe_b64decode(value.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None

    parts = raw.split(DELIMITER)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]
