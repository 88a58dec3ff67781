"""Password hashing service using bcrypt.

Provides salted, adaptive password hashing and verification.
"""

import bcrypt

from motopsy_identity.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt with a fixed work factor. Verification never raises:
    a malformed stored hash is treated as a non-match.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    DEFAULT_ROUNDS = 10
    # bcrypt only looks at the first 72 bytes of its input
    MAX_PASSWORD_BYTES = 72

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 10.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password is empty or longer than bcrypt can represent
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_PASSWORD_BYTES:
            msg = f"Password cannot exceed {self.MAX_PASSWORD_BYTES} bytes"
            raise WeakPasswordError(msg)

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise (including when the
        stored hash is missing or malformed)
        """
        if not password or not password_hash:
            return False
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash was made with a different work factor.

        Parameters
        ----------
        password_hash
            The existing hash to check

        Returns
        -------
        True if the hash should be regenerated
        """
        try:
            # bcrypt format: $2b$XX$...
            parts = password_hash.split("$")
            if len(parts) >= 3:
                return int(parts[2]) != self._rounds
        except (ValueError, IndexError):
            pass
        return True
