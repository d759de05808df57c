"""Short, human-readable labels for peers derived from their public keys."""

from __future__ import annotations

import base64

PUBLIC_KEY_SIZE = 32


def abbreviate_key(public_key: bytes) -> str:
    """Return ``peer(XXXX…YYYY)``: the first and last four base64 digits of the key.

    The trailing digits are taken from before the ``=`` padding. A key that is
    not 32 bytes long raises ``ValueError``.
    """
    key = bytes(public_key)
    if len(key) != PUBLIC_KEY_SIZE:
        raise ValueError(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(key)}")
    encoded = base64.b64encode(key).decode("ascii")
    return f"peer({encoded[0:4]}…{encoded[39:43]})"