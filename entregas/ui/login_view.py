"""Login View.

Email + password form.  Sign-in runs on a background thread through
``SupabaseAuthProvider``; the resolver reacts to the resulting
``SIGNED_IN`` event on its own, so this view only reports the outcome.

**Thin UI Rule**: no business logic here.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from entregas.auth import SupabaseAuthProvider
from entregas.logger import StructuredLogger
from entregas.models.auth_models import AuthResult
from entregas.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BRAND,
    FONT_BUTTON,
    FONT_SMALL,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_CARD_WIDTH: int = 420
_INPUT_HEIGHT: int = 44
_BUTTON_HEIGHT: int = 48
_LABEL_FONT: tuple[str, int, str] = ("Segoe UI", 11, "bold")
_BUTTON_TEXT: str = "Entrar  →"


class LoginView(ctk.CTkFrame):
    """Centred sign-in card.

    Parameters
    ----------
    parent:
        Content container of the host shell.
    auth_provider:
        Provider used for ``sign_in_with_password``.
    on_login_success:
        Callback invoked (on the main thread) after a successful sign-in.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        auth_provider: SupabaseAuthProvider,
        on_login_success: Callable[[], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        self._auth_provider = auth_provider
        self._on_login_success = on_login_success
        self._logger = logger

        self._email_entry: Optional[ctk.CTkEntry] = None
        self._password_entry: Optional[ctk.CTkEntry] = None
        self._login_button: Optional[ctk.CTkButton] = None
        self._error_label: Optional[ctk.CTkLabel] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)
        self.grid_columnconfigure(0, weight=1)

        card = ctk.CTkFrame(
            self,
            width=_CARD_WIDTH,
            fg_color=CONTENT_CARD_BG,
            corner_radius=16,
            border_width=1,
            border_color=INPUT_BORDER,
        )
        card.grid(row=1, column=0)

        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=36, pady=28)

        ctk.CTkLabel(
            inner,
            text="EntregasWoo",
            font=FONT_BRAND,
            text_color=TEXT_PRIMARY,
        ).pack(pady=(0, 2))
        ctk.CTkLabel(
            inner,
            text="Acesse sua conta",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_LG))

        ctk.CTkLabel(
            inner,
            text="EMAIL",
            font=_LABEL_FONT,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", pady=(0, 4))
        self._email_entry = ctk.CTkEntry(
            inner,
            placeholder_text="nome@exemplo.com",
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
            width=_CARD_WIDTH - 72,
        )
        self._email_entry.pack(fill="x", pady=(0, PADDING_MD))

        ctk.CTkLabel(
            inner,
            text="SENHA",
            font=_LABEL_FONT,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", pady=(0, 4))
        self._password_entry = ctk.CTkEntry(
            inner,
            placeholder_text="••••••••",
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            show="*",
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
        )
        self._password_entry.pack(fill="x", pady=(0, PADDING_LG))

        self._login_button = ctk.CTkButton(
            inner,
            text=_BUTTON_TEXT,
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=_BUTTON_HEIGHT,
            corner_radius=CORNER_RADIUS,
            command=self._handle_login,
        )
        self._login_button.pack(fill="x", pady=(0, PADDING_SM))

        self._error_label = ctk.CTkLabel(
            inner,
            text="",
            font=FONT_SMALL,
            text_color=ERROR_TEXT,
            wraplength=_CARD_WIDTH - 100,
        )

        self._email_entry.bind("<Return>", self._on_enter_key)
        self._password_entry.bind("<Return>", self._on_enter_key)
        self._email_entry.focus_set()

    # ------------------------------------------------------------------
    # Event Handlers
    # ------------------------------------------------------------------

    def _on_enter_key(self, event: tk.Event[tk.Misc]) -> None:
        self._handle_login()

    def _handle_login(self) -> None:
        """Gather inputs and start background authentication."""
        email = self._email_entry.get().strip()
        password = self._password_entry.get()

        if not email or not password:
            self._show_error("Informe email e senha.")
            return

        self._set_loading(True)
        self._clear_error()

        threading.Thread(
            target=self._authenticate,
            args=(email, password),
            daemon=True,
        ).start()

    def _authenticate(self, email: str, password: str) -> None:
        """Background thread: UI mutations go back through ``after(0, ...)``."""
        try:
            result: AuthResult = self._auth_provider.sign_in_with_password(email, password)
            if result.success:
                self.after(0, self._on_login_success)
            else:
                message = result.error_message or "Falha no login."
                self.after(0, lambda: self._show_error(message))
        except Exception as exc:
            self._logger.exception("Unexpected sign-in failure")
            error_msg = str(exc)
            self.after(
                0,
                lambda msg=error_msg: self._show_error(f"Falha no login: {msg}"),
            )
        finally:
            self.after(0, lambda: self._set_loading(False))

    # ------------------------------------------------------------------
    # UI Helper Methods
    # ------------------------------------------------------------------

    def _show_error(self, message: str) -> None:
        if self._error_label is not None:
            self._error_label.configure(text=message)
            self._error_label.pack(fill="x")

    def _clear_error(self) -> None:
        if self._error_label is not None:
            self._error_label.configure(text="")
            self._error_label.pack_forget()

    def _set_loading(self, loading: bool) -> None:
        """Disable the button while a sign-in is in flight."""
        if self._login_button is None or not self.winfo_exists():
            return
        if loading:
            self._login_button.configure(text="Entrando...", state="disabled")
        else:
            self._login_button.configure(text=_BUTTON_TEXT, state="normal")
