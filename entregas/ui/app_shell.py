"""Application Host Shell.

The top-level ``CTk`` window: sidebar on the left, one page at a time on
the right.  Every page except the login form is mounted inside a
``RouteGuardFrame``, so what is rendered always follows the resolved
profile.

All dependencies are injected via the constructor.  The shell contains
no business logic: roles come from the ``RoleResolver``, menu entries
from the ``PageRegistry`` and session redirects from ``route_policy``.
"""

from __future__ import annotations

import threading
from typing import Optional

import customtkinter as ctk

from entregas.config import AppConfig
from entregas.logger import StructuredLogger
from entregas.models.profile import ResolvedProfile
from entregas.navigation import PageRegistry
from entregas.services import ServiceContainer
from entregas.services.route_policy import resolve_redirect
from entregas.ui.dispatch import MainThreadProfileSource
from entregas.ui.login_view import LoginView
from entregas.ui.route_guard_frame import RouteGuardFrame
from entregas.ui.sidebar import SidebarNav
from entregas.ui.theme import CONTENT_BG, MAIN_WINDOW_HEIGHT, MAIN_WINDOW_WIDTH
from entregas.utils.subscription import Subscription


class AppShell(ctk.CTk):
    """Host Shell, the main application window.

    Lifecycle
    ---------
    1. On boot: builds sidebar + content area, shows the safe route and
       starts the resolver on a background thread.
    2. Every published profile refreshes the sidebar and re-applies the
       session redirects to the current route.
    3. Navigation destroys the current page (cancelling its guard) and
       mounts the target behind a fresh guard.
    4. Logout: ``RoleResolver.sign_out`` on a background thread, then back
       to the safe route.
    5. Close: stop the resolver, destroy the page, destroy the window.

    Parameters
    ----------
    config:
        Application configuration.
    services:
        Fully-wired service container.
    registry:
        Page registry populated before shell launch.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        config: AppConfig,
        services: ServiceContainer,
        registry: PageRegistry,
        logger: StructuredLogger,
    ) -> None:
        super().__init__()

        self._config = config
        self._services = services
        self._resolver = services["role_resolver"]
        self._registry = registry
        self._logger = logger

        self._source = MainThreadProfileSource(self._resolver, self)
        self._current_route: Optional[str] = None
        self._current_page: Optional[ctk.CTkFrame] = None
        self._profile_subscription: Optional[Subscription] = None

        self.title("EntregasWoo")
        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(800, 500)

        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._build_layout()
        self._profile_subscription = self._source.subscribe(self._on_profile)
        self._sidebar.refresh(self._resolver.profile)
        self.navigate(config.SAFE_ROUTE)
        self._start_resolver()

    # ==================================================================
    # Layout
    # ==================================================================

    def _build_layout(self) -> None:
        self._sidebar = SidebarNav(
            parent=self,
            registry=self._registry,
            on_navigate=self.navigate,
            on_login=lambda: self.navigate(self._config.LOGIN_ROUTE),
            on_logout=self._handle_logout,
            on_retry=self._handle_retry,
            logger=self._logger,
        )
        self._sidebar.pack(side="left", fill="y")

        self._content_container = ctk.CTkFrame(self, fg_color=CONTENT_BG)
        self._content_container.pack(side="top", fill="both", expand=True)

    # ==================================================================
    # Navigation
    # ==================================================================

    def navigate(self, route: str) -> None:
        """Show *route*, after applying the session redirects."""
        redirect = resolve_redirect(
            route,
            self._resolver.profile,
            login_route=self._config.LOGIN_ROUTE,
            default_route=self._config.DEFAULT_AUTHENTICATED_ROUTE,
        )
        if redirect is not None and redirect != route:
            self._logger.info("Redirect %s -> %s", route, redirect)
            route = redirect

        if route == self._current_route:
            return

        if route == self._config.LOGIN_ROUTE:
            self._mount(route, LoginView(
                parent=self._content_container,
                auth_provider=self._services["auth_provider"],
                on_login_success=self._handle_login_success,
                logger=self._logger,
            ))
            return

        try:
            entry = self._registry.get_page(route)
        except KeyError:
            self._logger.error("Cannot navigate to unregistered page: %s", route)
            if route != self._config.SAFE_ROUTE:
                self.navigate(self._config.SAFE_ROUTE)
            return

        self._mount(route, RouteGuardFrame(
            parent=self._content_container,
            page=entry,
            source=self._source,
            on_navigate=self.navigate,
            logger=self._logger,
            safe_route=self._config.SAFE_ROUTE,
            redirect_delay_ms=self._config.GUARD_REDIRECT_DELAY_MS,
        ))

    def _mount(self, route: str, page: ctk.CTkFrame) -> None:
        if self._current_page is not None:
            self._current_page.destroy()
        self._current_page = page
        self._current_route = route
        page.pack(fill="both", expand=True)
        self._sidebar.set_active(route)
        self._logger.info("Switched to page: %s", route)

    # ==================================================================
    # Profile updates (main thread)
    # ==================================================================

    def _on_profile(self, profile: ResolvedProfile) -> None:
        if not self.winfo_exists():
            return
        self._sidebar.refresh(profile)
        if self._current_route is not None:
            redirect = resolve_redirect(
                self._current_route,
                profile,
                login_route=self._config.LOGIN_ROUTE,
                default_route=self._config.DEFAULT_AUTHENTICATED_ROUTE,
            )
            if redirect is not None and redirect != self._current_route:
                self.navigate(redirect)

    # ==================================================================
    # Session actions
    # ==================================================================

    def _start_resolver(self) -> None:
        threading.Thread(
            target=self._resolver.start,
            name="role-resolver-start",
            daemon=True,
        ).start()

    def _handle_retry(self) -> None:
        threading.Thread(
            target=self._resolver.reload,
            name="role-resolver-reload",
            daemon=True,
        ).start()

    def _handle_login_success(self) -> None:
        """Called by ``LoginView``; the resolver picks up ``SIGNED_IN`` itself."""
        self._logger.info("Login successful.")
        self.navigate(self._config.DEFAULT_AUTHENTICATED_ROUTE)

    def _handle_logout(self) -> None:
        def _sign_out() -> None:
            self._resolver.sign_out()
            self.after(0, lambda: self.navigate(self._config.SAFE_ROUTE))

        threading.Thread(target=_sign_out, name="sign-out", daemon=True).start()

    # ==================================================================
    # Window close
    # ==================================================================

    def _on_close(self) -> None:
        """Release subscriptions and the resolver before destroying."""
        if self._profile_subscription is not None:
            self._profile_subscription.unsubscribe()
            self._profile_subscription = None
        self._resolver.stop()
        if self._current_page is not None:
            self._current_page.destroy()
            self._current_page = None
        self.destroy()
