"""Tests for password hashing."""
from splitledger.core.security import hash_password, verify_password


class TestPasswordHashing:
    """Hashes are salted bcrypt strings."""

    def test_hash_is_salted(self):
        password = "MySecurePassword123"

        assert hash_password(password) != hash_password(password)
        assert hash_password(password).startswith("$2")

    def test_verify_password_correct(self):
        hashed = hash_password("MySecurePassword123")

        assert verify_password("MySecurePassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("MySecurePassword123")

        assert verify_password("WrongPassword456", hashed) is False
        assert verify_password("", hashed) is False
