"""
Unit tests for security utilities.
"""
import pytest
from datetime import timedelta

from src.core.config import Settings
from src.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password(self):
        """Test that password hashing produces a hash."""
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert hashed != password
        assert len(hashed) > 20  # bcrypt hashes are long

    def test_hash_password_different_each_time(self):
        """Test that hashing same password produces different hashes."""
        password = "mysecretpassword"
        hash1 = hash_password(password)
        hash2 = hash_password(password)

        assert hash1 != hash2  # Different salts

    def test_verify_password_correct(self):
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert verify_password(password, hashed) is True

    def test_verify_password_incorrect(self):
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert verify_password("wrongpassword", hashed) is False


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_decode_access_token(self):
        """Test decoding an access token."""
        token = create_access_token(subject=42)

        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "42"
        assert payload["type"] == "access"

    def test_decode_invalid_token(self):
        """Test decoding an invalid token returns None."""
        assert decode_token("invalid.token.here") is None

    def test_expired_token_is_rejected(self):
        token = create_access_token(subject="7", expires_delta=timedelta(minutes=-1))

        assert decode_token(token) is None

    def test_access_token_with_custom_expiry(self):
        token = create_access_token(subject="7", expires_delta=timedelta(minutes=5))

        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "7"


class TestSettingsValidation:
    """JWT secret and log level checks in Settings."""

    def test_insecure_default_secret_rejected(self):
        with pytest.raises(ValueError):
            Settings(JWT_SECRET_KEY="changeme")

    def test_short_secret_rejected(self):
        with pytest.raises(ValueError):
            Settings(JWT_SECRET_KEY="too-short-for-hs256")

    def test_log_level_normalized(self):
        settings = Settings(JWT_SECRET_KEY="x" * 40, LOG_LEVEL="debug")

        assert settings.LOG_LEVEL == "DEBUG"

    def test_number_format_defaults(self):
        settings = Settings(JWT_SECRET_KEY="x" * 40)

        assert settings.ORDER_NUMBER_PREFIX == "OD-"
        assert settings.ORDER_NUMBER_WIDTH == 3
        assert settings.BILL_NUMBER_PREFIX == "INV-"
        assert settings.BILL_NUMBER_WIDTH == 4
