"""Resumption configuration management."""

from pydantic_settings import BaseSettings
from pydantic import Field


class ResumptionSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Cookies built from raw identity fields
    default_locale: str = Field(default="en", description="Locale used when none is given")

    # Trust list: hosts added here never expire
    trusted_hosts: list[str] = Field(default_factory=list, description="Extra trusted service URL hosts")
    trust_ttl_seconds: int = Field(default=86400, description="How long a resumed host stays trusted")

    # Codec
    compress_level: int = Field(default=9, description="gzip level used when serializing cookies")

    model_config = {"env_prefix": "RESUMPTION_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> ResumptionSettings:
    """Load settings from environment."""
    settings = ResumptionSettings()

    import logging
    logger = logging.getLogger("resumption.config")
    if not 0 <= settings.compress_level <= 9:
        clamped = min(9, max(0, settings.compress_level))
        logger.warning(
            f"RESUMPTION_COMPRESS_LEVEL={settings.compress_level} is outside 0..9, "
            f"using {clamped}"
        )
        settings.compress_level = clamped

    return settings
