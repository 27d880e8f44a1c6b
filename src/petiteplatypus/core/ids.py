"""Vault identifier generation.

Vault IDs are 16 lowercase hexadecimal characters derived from 8 bytes of
cryptographically strong randomness. Collisions are not detected.
"""

from __future__ import annotations

import secrets
from typing import Callable

from .errors import RandomnessUnavailable

__all__ = [
    "VAULT_ID_BYTES",
    "generate_vault_id",
]

VAULT_ID_BYTES = 8

RandomBytes = Callable[[int], bytes]


def generate_vault_id(random_bytes: RandomBytes | None = None) -> str:
    """Generate a new vault identifier.

    Parameters
    ----------
    random_bytes
        Source of random bytes taking a byte count (default:
        :func:`secrets.token_bytes`). Tests substitute a deterministic one.

    Returns
    -------
    str
        16-character lowercase hex identifier

    Raises
    ------
    RandomnessUnavailable
        If the source fails or returns fewer bytes than requested
    """
    source = random_bytes or secrets.token_bytes

    try:
        data = source(VAULT_ID_BYTES)
    except Exception as exc:
        raise RandomnessUnavailable(f"failed to generate random bytes: {exc}") from exc

    if len(data) != VAULT_ID_BYTES:
        raise RandomnessUnavailable(
            f"failed to generate random bytes: short read ({len(data)} of {VAULT_ID_BYTES} bytes)"
        )

    return bytes(data).hex()
