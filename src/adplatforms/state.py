"""Process-wide application state held by whatever transport embeds the service."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from adplatforms.config import Settings
from adplatforms.logs import setup_logging
from adplatforms.service import PlatformService

log = structlog.get_logger()


@dataclass
class AppState:
    settings: Settings
    service: PlatformService


def create_app_state(settings: Settings | None = None) -> AppState:
    """Configure logging and build a fresh, empty service."""
    settings = settings if settings is not None else Settings()
    setup_logging(settings.logging)
    state = AppState(settings=settings, service=PlatformService.from_settings(settings))
    log.info(
        "app_state_ready",
        cache_ttl_seconds=settings.cache.ttl_seconds,
        cache_soft_capacity=settings.cache.soft_capacity,
    )
    return state
