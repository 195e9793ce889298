"""
Service settings read from the environment.

Loaded once at startup and passed to create_app(); nothing else in the
service reads the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from core.logging_config import default_level


# Load environment
load_dotenv()


@dataclass(frozen=True)
class ServiceSettings:
    """Process-wide settings for the preview service."""
    interval_model: str = "multiplicative"
    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: int = logging.INFO


def load_settings() -> ServiceSettings:
    """
    Gather settings from environment variables.

    SCHEDULER_INTERVAL_MODEL: "multiplicative" (default) or "forgetting_curve"
    CORS_ALLOW_ORIGINS: comma-separated origins (default "*")
    SCHEDULER_LOG_LEVEL: logging level name (default INFO)
    """
    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return ServiceSettings(
        interval_model=os.getenv("SCHEDULER_INTERVAL_MODEL", "multiplicative").strip().lower(),
        cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        log_level=default_level(),
    )
