"""Short public reference codes for errors users should not see in full."""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = 8) -> str:
    """Return a random code such as ``"K3Q9ZT0A"``."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
