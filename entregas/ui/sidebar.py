"""Sidebar Navigation Component.

Displays the signed-in user's identity and role, the menu entries the
``PageRegistry`` allows for the current profile, and the sign-in /
sign-out button.  Follows the **Thin UI** rule: all actions are
delegated via injected callbacks.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from entregas.logger import StructuredLogger
from entregas.models.profile import ResolvedProfile
from entregas.navigation import PageEntry, PageRegistry
from entregas.ui.theme import (
    ACCENT_PRIMARY,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BRAND,
    FONT_SIDEBAR,
    FONT_SIDEBAR_ACTIVE,
    FONT_SMALL,
    LOGOUT_HOVER,
    LOGOUT_PRIMARY,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_ACTIVE,
    SIDEBAR_BG,
    SIDEBAR_HOVER,
    SIDEBAR_MUTED,
    SIDEBAR_TEXT,
    SIDEBAR_WIDTH,
)

_AVATAR_SIZE: int = 40

_ROLE_LABELS: dict[str, str] = {
    "visitante": "Visitante",
    "entregador": "Entregador",
    "gerente": "Gerente",
    "admin": "Administrador",
}


class _MenuButton(ctk.CTkButton):
    """Internal clickable sidebar entry for a single page."""

    def __init__(
        self,
        parent: ctk.CTkFrame,
        entry: PageEntry,
        on_click: Callable[[str], None],
    ) -> None:
        self._route = entry.route
        super().__init__(
            parent,
            text=f"  {entry.icon}   {entry.display_name}",
            anchor="w",
            font=FONT_SIDEBAR,
            text_color=SIDEBAR_TEXT,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            height=40,
            corner_radius=6,
            command=lambda: on_click(self._route),
        )

    @property
    def route(self) -> str:
        return self._route

    def set_active(self, active: bool) -> None:
        """Highlight or un-highlight this button."""
        if active:
            self.configure(fg_color=SIDEBAR_ACTIVE, font=FONT_SIDEBAR_ACTIVE)
        else:
            self.configure(fg_color="transparent", font=FONT_SIDEBAR)


class SidebarNav(ctk.CTkFrame):
    """Sidebar navigation panel for the host shell.

    ``refresh()`` is called with every published profile; the menu is
    rebuilt from ``registry.menu_for(profile)`` each time.

    Parameters
    ----------
    parent:
        The parent widget (the AppShell root).
    registry:
        Page registry the menu is built from.
    on_navigate:
        Called with the route when the user clicks an entry.
    on_login:
        Called when a signed-out user clicks "Entrar".
    on_logout:
        Called when a signed-in user clicks "Sair".
    on_retry:
        Called when the user asks to retry a failed resolution.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        registry: PageRegistry,
        on_navigate: Callable[[str], None],
        on_login: Callable[[], None],
        on_logout: Callable[[], None],
        on_retry: Callable[[], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, width=SIDEBAR_WIDTH, fg_color=SIDEBAR_BG)
        self.pack_propagate(False)

        self._registry = registry
        self._on_navigate = on_navigate
        self._on_login = on_login
        self._on_logout = on_logout
        self._on_retry = on_retry
        self._logger = logger

        self._buttons: dict[str, _MenuButton] = {}
        self._active_route: Optional[str] = None
        self._authenticated = False

        self._build_ui()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def refresh(self, profile: ResolvedProfile) -> None:
        """Redraw identity, menu and error area for *profile*."""
        self._authenticated = profile.is_authenticated
        self._render_identity(profile)
        self._render_menu(profile)
        self._render_error(profile)

        if profile.is_authenticated:
            self._session_btn.configure(
                text="  ⏻   Sair",
                text_color=LOGOUT_PRIMARY,
                hover_color=LOGOUT_HOVER,
            )
        else:
            self._session_btn.configure(
                text="  →   Entrar",
                text_color=SIDEBAR_TEXT,
                hover_color=SIDEBAR_HOVER,
            )

    def set_active(self, route: str) -> None:
        """Highlight *route* and un-highlight the previous one."""
        if self._active_route and self._active_route in self._buttons:
            self._buttons[self._active_route].set_active(False)
        if route in self._buttons:
            self._buttons[route].set_active(True)
        self._active_route = route

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        """Construct the static sidebar layout."""
        ctk.CTkLabel(
            self,
            text="EntregasWoo",
            font=FONT_BRAND,
            text_color=SIDEBAR_TEXT,
        ).pack(padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM), anchor="w")

        # --- User info: avatar + name + role ---
        row = ctk.CTkFrame(self, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))

        avatar = ctk.CTkFrame(
            row,
            width=_AVATAR_SIZE,
            height=_AVATAR_SIZE,
            corner_radius=_AVATAR_SIZE // 2,
            fg_color=ACCENT_PRIMARY,
        )
        avatar.pack(side="left", padx=(0, 10))
        avatar.pack_propagate(False)

        self._initials_label = ctk.CTkLabel(
            avatar,
            text="?",
            font=FONT_SIDEBAR_ACTIVE,
            text_color=SIDEBAR_TEXT,
        )
        self._initials_label.place(relx=0.5, rely=0.5, anchor="center")

        text_frame = ctk.CTkFrame(row, fg_color="transparent")
        text_frame.pack(side="left", fill="x", expand=True)

        self._name_label = ctk.CTkLabel(
            text_frame,
            text="Carregando...",
            font=FONT_SIDEBAR_ACTIVE,
            text_color=SIDEBAR_TEXT,
            anchor="w",
        )
        self._name_label.pack(fill="x")
        self._role_label = ctk.CTkLabel(
            text_frame,
            text="",
            font=FONT_SMALL,
            text_color=SIDEBAR_MUTED,
            anchor="w",
        )
        self._role_label.pack(fill="x")

        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, pady=PADDING_SM,
        )

        self._menu_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._menu_frame.pack(fill="both", expand=True, pady=PADDING_SM)

        # --- Bottom section: error area + session button ---
        bottom_frame = ctk.CTkFrame(self, fg_color="transparent")
        bottom_frame.pack(fill="x", padx=PADDING_SM, pady=PADDING_SM, side="bottom")

        self._session_btn = ctk.CTkButton(
            bottom_frame,
            text="",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            text_color=SIDEBAR_TEXT,
            anchor="w",
            height=36,
            corner_radius=6,
            command=self._on_session_click,
        )
        self._session_btn.pack(fill="x", side="bottom")

        self._error_frame = ctk.CTkFrame(bottom_frame, fg_color="transparent")
        self._error_label = ctk.CTkLabel(
            self._error_frame,
            text="",
            font=FONT_SMALL,
            text_color=ERROR_TEXT,
            wraplength=SIDEBAR_WIDTH - 2 * PADDING_MD,
            justify="left",
            anchor="w",
        )
        self._error_label.pack(fill="x")
        ctk.CTkButton(
            self._error_frame,
            text="Tentar novamente",
            font=FONT_SMALL,
            fg_color=SIDEBAR_ACTIVE,
            hover_color=SIDEBAR_HOVER,
            height=28,
            command=self._on_retry,
        ).pack(fill="x", pady=(4, 0))

        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, side="bottom",
        )

    def _render_identity(self, profile: ResolvedProfile) -> None:
        if profile.loading and not profile.is_authenticated:
            name = "Carregando..."
        elif profile.user_profile is not None:
            name = profile.user_profile.display_name
        elif profile.user is not None:
            name = profile.user.email or profile.user.id
        else:
            name = "Visitante"

        self._name_label.configure(text=name)
        self._initials_label.configure(text=self._get_initials(name))
        role_text = "" if profile.loading else _ROLE_LABELS.get(profile.user_role, "")
        self._role_label.configure(text=role_text)

    def _render_menu(self, profile: ResolvedProfile) -> None:
        for button in self._buttons.values():
            button.destroy()
        self._buttons.clear()

        for entry in self._registry.menu_for(profile):
            button = _MenuButton(self._menu_frame, entry, self._on_navigate)
            button.pack(fill="x", padx=PADDING_SM, pady=2)
            self._buttons[entry.route] = button

        if self._active_route in self._buttons:
            self._buttons[self._active_route].set_active(True)

    def _render_error(self, profile: ResolvedProfile) -> None:
        if profile.error and not profile.loading:
            self._error_label.configure(text=profile.error)
            self._error_frame.pack(fill="x", pady=(0, PADDING_SM), side="bottom")
        else:
            self._error_frame.pack_forget()

    def _on_session_click(self) -> None:
        if self._authenticated:
            self._on_logout()
        else:
            self._on_login()

    @staticmethod
    def _get_initials(full_name: str) -> str:
        """Extract up to two uppercase initials from a full name."""
        parts = full_name.strip().split()
        if len(parts) >= 2:
            return (parts[0][0] + parts[-1][0]).upper()
        if parts:
            return parts[0][0].upper()
        return "?"
