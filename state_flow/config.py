"""Configuration utilities for state-flow runs."""

import sys
from functools import lru_cache

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlowSettings(BaseSettings):
    """Defaults a caller may opt into when building run options."""

    model_config = SettingsConfigDict(
        env_prefix="STATE_FLOW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    breadcrumb_separator: str = " -> "
    fail_fast: bool = False
    log_level: str = "WARNING"
    log_passes: bool = False


@lru_cache
def get_settings() -> FlowSettings:
    """Return cached FlowSettings to avoid repeated environment parsing."""

    return FlowSettings()


def configure_logging(settings: FlowSettings) -> int:
    """Replace loguru's sinks with a single stderr sink at the configured level."""

    logger.remove()
    return logger.add(sys.stderr, level=settings.log_level.upper())
