from __future__ import annotations
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Tuple

logger = logging.getLogger('hooks')

Listener = Callable[..., Awaitable[None]]

# Events emitted by this package:
#   'bot.ready'            ()        after cogs are loaded and commands synced
#   'migration.started'    (version)
#   'migration.completed'  (report)


class HookRegistry:
    """Async event listeners, run in registration order."""

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Listener, bool]]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[event].append((listener, False))

    def once(self, event: str, listener: Listener) -> None:
        self._listeners[event].append((listener, True))

    def off(self, event: str, listener: Listener) -> None:
        self._listeners[event] = [(fn, once) for fn, once in self._listeners[event] if fn is not listener]

    async def emit(self, event: str, *args, **kwargs) -> None:
        entries = self._listeners.get(event, [])
        if not entries:
            return
        self._listeners[event] = [(fn, once) for fn, once in entries if not once]
        for listener, _ in entries:
            try:
                await listener(*args, **kwargs)
            except Exception:
                # One failing listener must not stop the others
                logger.exception('Listener for %s failed', event)


# Global registry instance
HOOKS = HookRegistry()
