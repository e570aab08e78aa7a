from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Hashable, List, TypeAlias

Listener: TypeAlias = Callable[[Any], None]


class ChangeBus:
    """Synchronous listener registry keyed by topic (a cell)."""

    def __init__(self) -> None:
        self._subscribers: Dict[Hashable, List[Listener]] = defaultdict(list)
        self._logger = logging.getLogger(__name__)

    def subscribe(self, topic: Hashable, listener: Listener) -> None:
        """Register a listener for a topic."""
        if listener not in self._subscribers[topic]:
            self._subscribers[topic].append(listener)

    def unsubscribe(self, topic: Hashable, listener: Listener) -> None:
        """Remove a listener from a topic."""
        listeners = self._subscribers.get(topic)
        if listeners and listener in listeners:
            listeners.remove(listener)
            if not listeners:
                del self._subscribers[topic]

    def has_listeners(self, topic: Hashable) -> bool:
        return bool(self._subscribers.get(topic))

    def topics(self) -> List[Hashable]:
        """Topics with at least one listener, in subscription order."""
        return [topic for topic, listeners in self._subscribers.items() if listeners]

    def publish(self, topic: Hashable, value: Any) -> None:
        """Call every listener of a topic with the new value."""
        listeners = list(self._subscribers.get(topic, []))
        if not listeners:
            self._logger.debug(f"No listeners for {topic!r}")
            return

        self._logger.debug(f"Publishing {topic!r} to {len(listeners)} listener(s)")
        for listener in listeners:
            self._safe_dispatch(topic, listener, value)

    def _safe_dispatch(self, topic: Hashable, listener: Listener, value: Any) -> None:
        """Dispatch wrapper to keep one listener failure from stopping the bus."""
        listener_name = getattr(listener, "__name__", str(listener))
        try:
            listener(value)
        except Exception as exc:
            self._logger.exception(
                f"Listener error in '{listener_name}' for {topic!r}",
                exc_info=exc,
            )
