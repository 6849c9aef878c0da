"""
Password hashing with passlib's bcrypt scheme.
"""

from passlib.context import CryptContext

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """Salted one-way hashing with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a candidate password; malformed hashes never verify."""
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            return False

    def dummy_verify(self) -> bool:
        """Spend the cost of one verification against a throwaway hash. Always False."""
        self._context.dummy_verify()
        return False
