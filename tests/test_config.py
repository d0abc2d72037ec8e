"""
Tests for settings validation.
"""
import pytest
from pydantic import ValidationError

from menuboard.core.config import Settings

STRONG_KEY = "k" * 40


class TestSettings:
    def test_placeholder_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET_KEY="changeme")

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET_KEY="short-key")

    @pytest.mark.parametrize("length", [3, 17])
    def test_pairing_length_bounds(self, length):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET_KEY=STRONG_KEY, PAIRING_CODE_LENGTH=length)

    def test_pairing_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET_KEY=STRONG_KEY, PAIRING_CODE_MAX_ATTEMPTS=0)

    def test_defaults(self):
        settings = Settings(JWT_SECRET_KEY=STRONG_KEY)

        assert settings.PAIRING_CODE_LENGTH == 6
        assert settings.ITEM_IMAGE_MAX_BYTES == 5 * 1024 * 1024
        assert settings.DISPLAY_MEDIA_MAX_BYTES == 50 * 1024 * 1024
