"""
FastAPI Dependencies

Provides dependency injection for the indicator service and settings.
"""
from typing import AsyncGenerator, List

from config.settings import settings
from src.localhealth.services.health_indicators import HealthIndicatorService


class NotificationCollector:
    """Collects user-facing failure messages raised while serving one request."""

    def __init__(self):
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


async def get_indicator_service() -> AsyncGenerator[HealthIndicatorService, None]:
    """
    Indicator service dependency.

    Each request gets its own service and HTTP client; nothing is shared
    between requests.

    Yields:
        HealthIndicatorService whose `notify` is a NotificationCollector
    """
    service = HealthIndicatorService(notify=NotificationCollector())
    try:
        yield service
    finally:
        await service.aclose()


def get_settings():
    """
    Settings dependency.

    Returns:
        Application settings
    """
    return settings
