"""Block/board ID recognition and generation."""

import re
import secrets
import string
import time

ID_LENGTH = 27
_ID_ALPHABET = string.ascii_lowercase + string.digits

# Focalboard IDs are 26-27 lowercase alphanumerics; some deployments use UUIDs.
_NATIVE_ID = re.compile(r"^[a-z0-9]{20,}$")
_UUID = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def looks_like_id(value: str) -> bool:
    """True when value is shaped like an ID rather than a human title."""
    return bool(_NATIVE_ID.match(value) or _UUID.match(value))


def new_id() -> str:
    """Generate a 27-character lowercase alphanumeric ID from a CSPRNG."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


def now_millis() -> int:
    """Current time as epoch milliseconds, the unit of createAt/updateAt."""
    return int(time.time() * 1000)
