"""Main-thread profile delivery.

The resolver publishes from whichever thread ran the lookup.  Tk
widgets may only be touched from the main loop, so widgets observe the
resolver through this adapter, which re-posts every publish with
``widget.after(0, ...)``.
"""

from __future__ import annotations

import tkinter as tk
from typing import Callable

from entregas.models.profile import ResolvedProfile
from entregas.services.role_resolver import RoleResolver
from entregas.utils.subscription import Subscription


class MainThreadProfileSource:
    """``ProfileSource`` whose listeners always run on the Tk main loop."""

    def __init__(self, resolver: RoleResolver, widget: tk.Misc) -> None:
        self._resolver = resolver
        self._widget = widget

    @property
    def profile(self) -> ResolvedProfile:
        return self._resolver.profile

    def subscribe(self, listener: Callable[[ResolvedProfile], None]) -> Subscription:
        def _post(profile: ResolvedProfile) -> None:
            self._widget.after(0, listener, profile)

        return self._resolver.subscribe(_post)
