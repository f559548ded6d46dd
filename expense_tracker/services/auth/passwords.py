"""
Password hashing.

Wraps werkzeug's salted scrypt hashing. The stored string records the
method and its parameters (e.g. ``scrypt:32768:8:1$<salt>$<hash>``), so
hashes made with older parameters keep verifying after the defaults change.
Comparison is constant-time (hmac.compare_digest inside werkzeug).
"""

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:

    def __init__(self, method: str = "scrypt", salt_length: int = 16):
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return generate_password_hash(
            password,
            method=self._method,
            salt_length=self._salt_length,
        )

    def verify(self, password: str, password_hash: str) -> bool:
        """True if `password` matches. A corrupt stored hash never matches."""
        try:
            return check_password_hash(password_hash, password)
        except ValueError:
            return False
