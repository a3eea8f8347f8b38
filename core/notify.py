from __future__ import annotations
import logging
from typing import Protocol

logger = logging.getLogger('notify')


class Notifier(Protocol):
    async def info(self, message: str, permanent: bool = False) -> None: ...


class LoggingNotifier(Notifier):
    """Notifier for headless runs: banners go to the log."""
    def __init__(self, name: str = 'notify'):
        self.logger = logging.getLogger(name)

    async def info(self, message: str, permanent: bool = False) -> None:
        self.logger.info(message)


async def notify(notifier: Notifier, message: str, permanent: bool = False) -> None:
    """Fire-and-forget: a failing notifier is logged, never raised."""
    try:
        await notifier.info(message, permanent=permanent)
    except Exception:
        logger.exception('Notification failed: %s', message)

__all__ = ["Notifier", "LoggingNotifier", "notify"]
