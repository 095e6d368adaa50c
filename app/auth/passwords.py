"""Password hashing with bcrypt."""

import bcrypt

_ENCODING = "utf-8"


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(password.encode(_ENCODING), bcrypt.gensalt()).decode(_ENCODING)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored hash.

    A malformed stored hash counts as a mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(plain_password.encode(_ENCODING), hashed_password.encode(_ENCODING))
    except ValueError:
        return False
