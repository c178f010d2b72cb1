"""Password hashing for users."""

import bcrypt

DEFAULT_COST = 10


def hash_password_string(password: str) -> str:
    """Return the bcrypt hash of a password at the default cost."""
    salt = bcrypt.gensalt(rounds=DEFAULT_COST, prefix=b"2a")
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def check_password(password: str, hashed: str) -> bool:
    """Tell whether a password matches a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))