"""
bcrypt password hashing with SHA-256 pre-hashing.

Example:
    hasher = PasswordHasher()
    password_hash = hasher.hash_password("correct horse battery staple")
    hasher.verify_password("correct horse battery staple", password_hash)  # True
"""

import base64
import hashlib

import bcrypt as bcrypt_lib


class PasswordHasher:
    """Slow salted one-way hashing for stored credentials."""

    def __init__(self, rounds: int = 12):
        """
        Initialize PasswordHasher.

        Args:
            rounds: bcrypt cost factor
        """
        self.rounds = rounds

    def _prehash_password(self, password: str) -> str:
        """
        Pre-hash password with SHA-256 before bcrypt.

        This handles bcrypt's 72-byte limit and ensures consistent
        behavior across all password lengths.
        """
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Returns False for malformed hashes instead of raising.
        """
        prehashed = self._prehash_password(password)
        try:
            return bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False
