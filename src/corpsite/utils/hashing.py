"""Password hashing utilities for corpsite.

Hashes are bcrypt strings (``$2b$...``), the format the API's login flow
verifies against.
"""

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt and a random salt.

    Args:
        password: Plain-text password.
        rounds: bcrypt cost factor.

    Returns:
        bcrypt hash as text.
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False
