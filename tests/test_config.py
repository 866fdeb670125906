"""Tests for settings loading."""

import pytest

from blitz.config import BlitzSettings

_ENV_VARS = [
    "TELEGRAM_BOT_TOKEN", "BLITZ_TELEGRAM_BOT_TOKEN", "OWNER_OPAY_INFO", "BLITZ_OWNER_OPAY_INFO",
    "BLITZ_COMMAND_PREFIX", "BLITZ_TTT_IDLE_TIMEOUT", "BLITZ_MAX_UPLOAD_MB", "BLITZ_DOWNLOAD_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = BlitzSettings(_env_file=None)
        assert settings.telegram_bot_token is None
        assert settings.command_prefix == "."
        assert settings.owner_opay_info == "Opay details not set in environment variables."
        assert settings.ttt_idle_timeout == 0
        assert settings.max_upload_bytes == 50 * 1024 * 1024

    def test_plain_token_variable(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        assert BlitzSettings(_env_file=None).telegram_bot_token == "123:abc"

    def test_prefixed_token_variable(self, monkeypatch):
        monkeypatch.setenv("BLITZ_TELEGRAM_BOT_TOKEN", "456:def")
        assert BlitzSettings(_env_file=None).telegram_bot_token == "456:def"

    def test_owner_info(self, monkeypatch):
        monkeypatch.setenv("OWNER_OPAY_INFO", "Opay 0123456789")
        assert BlitzSettings(_env_file=None).owner_opay_info == "Opay 0123456789"

    def test_prefixed_fields(self, monkeypatch):
        monkeypatch.setenv("BLITZ_COMMAND_PREFIX", "!")
        monkeypatch.setenv("BLITZ_TTT_IDLE_TIMEOUT", "600")
        monkeypatch.setenv("BLITZ_MAX_UPLOAD_MB", "20")
        settings = BlitzSettings(_env_file=None)
        assert settings.command_prefix == "!"
        assert settings.ttt_idle_timeout == 600
        assert settings.max_upload_bytes == 20 * 1024 * 1024

    def test_scratch_dir(self, tmp_path):
        assert BlitzSettings(_env_file=None, download_dir=str(tmp_path)).scratch_dir == str(tmp_path)

    def test_rejects_negative_idle_timeout(self, monkeypatch):
        monkeypatch.setenv("BLITZ_TTT_IDLE_TIMEOUT", "-5")
        with pytest.raises(ValueError):
            BlitzSettings(_env_file=None)
