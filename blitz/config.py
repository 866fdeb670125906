"""Blitz configuration management."""

import logging
import tempfile
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger("blitz.config")


class BlitzSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Telegram: BLITZ_TELEGRAM_BOT_TOKEN, or plain TELEGRAM_BOT_TOKEN
    telegram_bot_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("BLITZ_TELEGRAM_BOT_TOKEN", "TELEGRAM_BOT_TOKEN"),
        description="Telegram bot token",
    )

    # Owner payment info shown by .aza / .acc / .donate
    owner_opay_info: str = Field(
        default="Opay details not set in environment variables.",
        validation_alias=AliasChoices("BLITZ_OWNER_OPAY_INFO", "OWNER_OPAY_INFO"),
        description="Owner Opay account details",
    )

    # Commands
    command_prefix: str = Field(default=".", min_length=1, description="Command prefix")
    bot_name: str = Field(default="A.A.W Blitz ⚡ Bot", description="Bot display name")

    # Media
    tiktok_api_url: str = Field(default="https://www.tikwm.com/api/", description="tikwm-compatible API")
    tiktok_timeout: float = Field(default=15.0, gt=0, description="TikTok API timeout (seconds)")
    download_dir: Optional[str] = Field(default=None, description="Scratch dir for downloads")
    max_upload_mb: int = Field(default=50, gt=0, description="Largest file to upload (MB)")

    # Tic Tac Toe: 0 keeps abandoned games forever
    ttt_idle_timeout: float = Field(default=0, ge=0, description="Drop idle games after N seconds")

    # Logging
    debug: bool = Field(default=False, description="Debug mode")
    log_file: Optional[str] = Field(default=None, description="Also log to this file")

    model_config = {"env_prefix": "BLITZ_", "env_file": ".env", "extra": "ignore", "populate_by_name": True}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def scratch_dir(self) -> str:
        return self.download_dir or tempfile.gettempdir()


def load_settings(**overrides) -> BlitzSettings:
    """Load settings from environment."""
    settings = BlitzSettings(**overrides)
    if not settings.telegram_bot_token:
        logger.debug("No Telegram bot token configured.")
    return settings
