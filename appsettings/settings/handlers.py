"""
Settings Handlers
=================
Registry of named accessor/mutator handlers and hook execution.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from .protocols import SettingHandler
from .schemas import Hook, InlineHook, NamedHook

logger = logging.getLogger(__name__)


class HandlerNotFoundError(LookupError):
    """Raised when a named accessor/mutator has not been registered."""

    def __init__(self, handler: str):
        self.handler = handler
        super().__init__(f"No settings handler registered under '{handler}'")


class HandlerRegistry:
    """Named handlers available to accessor/mutator hooks.

    An entry is either a handler instance, returned as is, or a class or
    factory called with no arguments every time it is resolved.

    Usage:
        registry = HandlerRegistry()
        registry.register("upper", UppercaseHandler)
        registry.resolve("upper").handle("abc", "site_title")
    """

    def __init__(self, handlers: Optional[Dict[str, Any]] = None):
        self._handlers: Dict[str, Union[SettingHandler, Callable[[], SettingHandler]]] = {}
        for name, handler in (handlers or {}).items():
            self.register(name, handler)

    def register(self, name: str, handler: Any) -> None:
        self._handlers[name] = handler

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def resolve(self, name: str) -> SettingHandler:
        """Get a handler instance.

        Raises:
            HandlerNotFoundError: If nothing is registered under name
        """
        if name not in self._handlers:
            raise HandlerNotFoundError(name)

        entry = self._handlers[name]
        if hasattr(entry, "handle") and not isinstance(entry, type):
            return entry
        return entry()

    def run(self, hook: Hook, name: str, value: Any) -> Any:
        """Run an accessor or mutator on value."""
        if isinstance(hook, InlineHook):
            return hook.fn(value, name)

        if isinstance(hook, NamedHook):
            logger.debug(f"Running handler '{hook.handler}' for {name}")
            return self.resolve(hook.handler).handle(value, name)

        raise TypeError(f"Unsupported hook for {name}: {hook!r}")
