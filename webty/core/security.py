import os
import hashlib
import bcrypt


def newkey(n: int) -> str:
    """Generate a cryptographically secure random key."""
    return os.urandom(n).hex()


def new_sk() -> str:
    """Generate a new user secret key."""
    return f"sk-{newkey(32)}"


def sk_lookup_id(secret_key: str) -> str:
    """First 16 chars of a secret key, stored in clear for lookup."""
    return secret_key[:16] if len(secret_key) >= 16 else secret_key


def _prepare_key_for_bcrypt(key: str) -> bytes:
    """
    Bcrypt only reads 72 bytes, so longer keys are pre-hashed with SHA256.
    """
    key_bytes = key.encode('utf-8')
    if len(key_bytes) > 72:
        return hashlib.sha256(key_bytes).hexdigest().encode('utf-8')
    return key_bytes


def hash_key(key: str) -> str:
    """
    Hash a secret key with bcrypt.

    The cost factor comes from WEBTY_BCRYPT_ROUNDS (default 12).
    """
    rounds = int(os.getenv("WEBTY_BCRYPT_ROUNDS", "12"))
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_prepare_key_for_bcrypt(key), salt)
    return hashed.decode('utf-8')


def verify_key(plain_key: str, hashed_key: str) -> bool:
    """Check a secret key against its bcrypt hash."""
    try:
        return bcrypt.checkpw(_prepare_key_for_bcrypt(plain_key), hashed_key.encode('utf-8'))
    except (ValueError, TypeError):
        return False
