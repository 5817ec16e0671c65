"""Cancellable subscription handle."""

from __future__ import annotations

import threading
from typing import Callable, Optional


class Subscription:
    """Handle returned by every ``subscribe``-style call.

    ``unsubscribe()`` runs the release callback exactly once, no matter
    how many times it is called or from which thread.

    Usage::

        sub = resolver.subscribe(on_profile)
        ...
        sub.unsubscribe()
    """

    def __init__(self, release: Callable[[], None], name: str = "") -> None:
        self._release: Optional[Callable[[], None]] = release
        self._lock = threading.Lock()
        self.name = name

    @property
    def active(self) -> bool:
        with self._lock:
            return self._release is not None

    def unsubscribe(self) -> bool:
        """Release the subscription.

        Returns ``True`` on the call that actually released it and
        ``False`` on every later call.
        """
        with self._lock:
            release, self._release = self._release, None
        if release is None:
            return False
        release()
        return True

    def __repr__(self) -> str:
        state = "active" if self.active else "released"
        return f"<Subscription {self.name or hex(id(self))} {state}>"
