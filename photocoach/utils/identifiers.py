"""
Identifier and clock helpers shared by sessions and messages.
"""

import secrets
import string
import time

_ID_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def generate_id() -> str:
    """
    Generate a unique opaque ID.

    Format is ``<epoch-ms>_<9 base-36 chars>``; the time prefix keeps IDs
    roughly sortable and the random suffix avoids collisions within the
    same millisecond.
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{now_ms()}_{suffix}"
