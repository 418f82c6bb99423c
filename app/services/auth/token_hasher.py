"""
Refresh token generation and hashing utilities.

Refresh tokens are handed to the client in plaintext once; only their
SHA-256 hash is stored.
"""

import hashlib
import uuid


class TokenHasher:
    """
    Handles token generation and hashing.
    """

    @staticmethod
    def generate_token() -> str:
        """
        Generate an opaque refresh token.

        Returns:
            Random (version 4) UUID string
        """
        return str(uuid.uuid4())

    @staticmethod
    def hash_token(token: str) -> str:
        """
        Create SHA-256 hash of a token.
        Used for secure storage (never store plain tokens).

        Args:
            token: Plain token string

        Returns:
            Hex-encoded SHA-256 hash
        """
        return hashlib.sha256(token.encode()).hexdigest()
