"""Minimal observable value container for session state."""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from infitrivia.core.logging import get_logger

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """Hold a value and notify subscribers when it changes.

    Assigning a value equal to the current one is a no-op, so listeners only
    see real transitions. Listeners run synchronously in subscription order;
    one that raises is logged and skipped.
    """

    def __init__(
        self, initial: T, *, name: str = "", logger: logging.Logger | None = None
    ) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []
        self.name = name
        self._logger = logger or get_logger("trivia.observable")

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        for listener in list(self._listeners):
            self._notify(listener, new_value)

    def _notify(self, listener: Listener[T], value: T) -> None:
        try:
            listener(value)
        except Exception:
            self._logger.exception(
                "Observable listener failed", extra={"field": self.name}
            )

    def subscribe(
        self, listener: Listener[T], *, replay: bool = False
    ) -> Unsubscribe:
        """Register ``listener``; ``replay`` delivers the current value now."""

        self._listeners.append(listener)
        if replay:
            self._notify(listener, self._value)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def __repr__(self) -> str:
        return f"Observable({self.name or '?'}={self._value!r})"
