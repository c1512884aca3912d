"""
auth/passwords.py -- Credential hashing with bcrypt.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection probes with a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

The hash string bcrypt produces ("$2b$10$<salt><digest>") carries the
algorithm, cost factor, and salt, so verification needs nothing but the
stored string. Each call to hash_password() draws a fresh salt, so hashing
the same password twice gives two different strings that both verify.

Cost factor 10 puts a single hash in the tens-to-hundreds of milliseconds
range on server hardware.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only consumes the first 72 bytes of its input. Older bindings
# truncated silently; bcrypt >= 5 raises ValueError instead. Truncating here,
# identically for hash and verify, keeps long passwords working.
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of the given plaintext password."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares digests in constant time. A malformed or
    truncated hash is reported as a mismatch rather than raised.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False
