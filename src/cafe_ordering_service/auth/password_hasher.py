"""bcrypt password hashing."""

import bcrypt

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    """Check whether a password exceeds what bcrypt can hash in full."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _encode(password: str) -> bytes:
    if password_too_long(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password.encode("utf-8")


class PasswordHasher:
    """Salted bcrypt hashing with constant-time comparison.

    Passwords longer than 72 UTF-8 bytes are refused rather than truncated,
    so two passwords sharing a 72-byte prefix never verify alike.
    """

    def __init__(self, rounds: int = 10) -> None:
        """Initialize the hasher.

        Args:
            rounds: bcrypt cost factor
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plain-text password.

        Raises:
            ValueError: If the password is longer than 72 bytes
        """
        hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Check a plain-text password against a stored hash.

        Returns:
            bool: True if the password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except ValueError:
            # Over-long password or a stored value that is not a bcrypt hash
            return False
