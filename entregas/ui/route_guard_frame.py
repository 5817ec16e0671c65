"""Route Guard Frame.

Renders an ``AccessGuard`` for one page: a spinner while the profile
loads, the page itself once authorized, or the unauthorized notice with
a way back.  The page factory is only called on ``AUTHORIZED``, so no
protected widget exists before the check passes.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from entregas.logger import StructuredLogger
from entregas.models.enums import GuardState
from entregas.navigation import PageEntry
from entregas.services.access_guard import AccessGuard, ProfileSource
from entregas.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    PADDING_MD,
    TEXT_SECONDARY,
)


class RouteGuardFrame(ctk.CTkFrame):
    """Guarded container for a single page.

    Parameters
    ----------
    parent:
        Content container of the host shell.
    page:
        Registry entry: required role and the page factory.
    source:
        Main-thread profile source.
    on_navigate:
        Shell navigation callback, used for the redirect.
    logger:
        Structured logger instance.
    safe_route:
        Destination of the redirect and the "back" button.
    redirect_delay_ms:
        Delay before the automatic redirect.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        page: PageEntry,
        source: ProfileSource,
        on_navigate: Callable[[str], None],
        logger: StructuredLogger,
        safe_route: str,
        redirect_delay_ms: int,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._page = page
        self._logger = logger
        self._body: Optional[ctk.CTkFrame] = None
        self._content: Optional[ctk.CTkFrame] = None

        self._guard = AccessGuard(
            required_role=page.required_role,
            source=source,
            scheduler=self,
            on_navigate=on_navigate,
            logger=logger,
            on_state_change=self._render,
            safe_route=safe_route,
            redirect_delay_ms=redirect_delay_ms,
        )
        self._render(GuardState.PENDING)
        self._guard.mount()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, state: GuardState) -> None:
        if state == GuardState.DENIED_AND_REDIRECTING:
            return  # DENIED already drew the notice

        if self._body is not None:
            self._body.destroy()
            self._body = None

        if state == GuardState.PENDING:
            self._body = self._build_pending()
        elif state == GuardState.AUTHORIZED:
            if self._content is None:
                self._content = self._page.factory(self)
                self._content.pack(fill="both", expand=True)
        else:
            if self._content is not None:
                self._content.destroy()
                self._content = None
            self._body = self._build_unauthorized()

    def _build_pending(self) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.place(relx=0.5, rely=0.5, anchor="center")
        progress = ctk.CTkProgressBar(frame, mode="indeterminate", width=160)
        progress.pack(pady=(0, PADDING_MD))
        progress.start()
        ctk.CTkLabel(
            frame,
            text="Verificando permissões...",
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
        ).pack()
        return frame

    def _build_unauthorized(self) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.place(relx=0.5, rely=0.5, anchor="center")
        ctk.CTkLabel(
            frame,
            text="Acesso Não Autorizado",
            font=FONT_HEADING,
            text_color=ERROR_TEXT,
        ).pack()
        ctk.CTkLabel(
            frame,
            text="Você não tem permissão para acessar esta página.",
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(PADDING_MD // 2, PADDING_MD))
        ctk.CTkButton(
            frame,
            text="Voltar ao início",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            command=self._guard.navigate_home,
        ).pack()
        return frame

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Cancel the redirect timer and the subscription, then destroy."""
        self._guard.unmount()
        super().destroy()
