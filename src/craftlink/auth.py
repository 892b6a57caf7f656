"""Craftbot authorization token derivation.

The firmware expects an HTTP Basic credential whose secret is a two-stage
SHA-256 of the password, salted with fixed prefixes and the username.
Any deviation from this scheme is rejected by the device.
"""

from __future__ import annotations

import base64
import hashlib

PASSWORD_PREFIX = "flow_admin_"


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_password(username: str, password: str) -> str:
    """Return the lowercase hex digest the device stores for this user."""
    pwd_digest = _sha256_hex(PASSWORD_PREFIX + password)
    return _sha256_hex(f"-{username}-{pwd_digest}-")


def encode_credentials(username: str, password: str) -> str:
    """Return base64("<username>:<digest>") without the scheme prefix."""
    raw = f"{username}:{hash_password(username, password)}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def derive_auth_token(username: str, password: str) -> str:
    """Return the ``Authorization`` header value for a Craftbot device."""
    return "Basic " + encode_credentials(username, password)
