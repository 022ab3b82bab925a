"""Owner password hashing.

Each salon owner logs in with their own password. Only a salted PBKDF2
digest is stored, encoded as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``
(salt and digest in hex).
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from salon.config import settings

ALGORITHM = "pbkdf2_sha256"


def _digest(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str, iterations: int | None = None) -> str:
    """Encode a new salted digest for ``password``."""
    rounds = iterations or settings.security.password_iterations
    salt = secrets.token_bytes(16)
    return f"{ALGORITHM}${rounds}${salt.hex()}${_digest(password, salt, rounds).hex()}"


def verify_password(password: str, encoded: str | None) -> bool:
    """Constant-time check of ``password`` against a stored digest.

    Malformed or missing hashes never verify.
    """
    if not encoded:
        return False
    try:
        algorithm, rounds, salt_hex, digest_hex = encoded.split("$")
        iterations = int(rounds)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    return hmac.compare_digest(_digest(password, salt, iterations), expected)
