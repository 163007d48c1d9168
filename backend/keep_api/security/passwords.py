"""
Keep API — Password Hashing
=============================

What:  bcrypt-based one-way salted hashing for admin passwords.
How:   bcrypt.gensalt(rounds) embeds a fresh salt and the cost factor into
       every hash, so the stored string alone is enough to verify later.

Verification always goes through bcrypt.checkpw, never a direct comparison
of hash bytes or plaintext.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash `password` with a fresh salt at the given work factor."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check `password` against a stored bcrypt hash.

    A stored value that is not a valid bcrypt hash yields False.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False
