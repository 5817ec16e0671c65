"""Profile View.

Edit form for the signed-in user's ``usuarios`` row.  Writes go through
``RoleResolver.update_user_profile`` so the published profile stays in
sync with what is stored.
"""

from __future__ import annotations

import threading
from typing import Optional

import customtkinter as ctk

from entregas.logger import StructuredLogger
from entregas.models.profile import ProfileUpdate, ProfileUpdateResult, ResolvedProfile
from entregas.services.role_resolver import RoleResolver
from entregas.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_SMALL,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    SUCCESS_TEXT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_FIELDS: tuple[tuple[str, str], ...] = (
    ("nome_completo", "Nome completo *"),
    ("nome_usuario", "Nome de usuário"),
    ("telefone", "Telefone *"),
    ("foto", "URL da foto"),
)


class ProfileView(ctk.CTkFrame):
    """Profile card with an editable form.

    Parameters
    ----------
    parent:
        Content container provided by the route guard.
    resolver:
        Source of the current profile and target of the edit.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        resolver: RoleResolver,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._resolver = resolver
        self._logger = logger
        self._entries: dict[str, ctk.CTkEntry] = {}
        self._save_button: Optional[ctk.CTkButton] = None
        self._message_label: Optional[ctk.CTkLabel] = None

        self._build_ui(resolver.profile)

    def _build_ui(self, profile: ResolvedProfile) -> None:
        card = ctk.CTkFrame(self, fg_color=CONTENT_CARD_BG, corner_radius=CORNER_RADIUS)
        card.pack(padx=PADDING_LG, pady=PADDING_LG, fill="x")

        ctk.CTkLabel(
            card,
            text="Meu Perfil",
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))

        email = profile.user.email if profile.user is not None else ""
        ctk.CTkLabel(
            card,
            text=email or "",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))

        record = profile.user_profile
        if record is None:
            ctk.CTkLabel(
                card,
                text=profile.error or "Perfil não encontrado.",
                font=FONT_BODY,
                text_color=ERROR_TEXT,
                anchor="w",
            ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))
            return

        for field, label in _FIELDS:
            ctk.CTkLabel(
                card,
                text=label,
                font=FONT_SMALL,
                text_color=TEXT_PRIMARY,
                anchor="w",
            ).pack(fill="x", padx=PADDING_MD)
            entry = ctk.CTkEntry(
                card,
                font=FONT_BODY,
                fg_color=INPUT_BG,
                border_color=INPUT_BORDER,
                text_color=TEXT_PRIMARY,
                height=36,
            )
            entry.insert(0, getattr(record, field) or "")
            entry.pack(fill="x", padx=PADDING_MD, pady=(2, PADDING_SM))
            self._entries[field] = entry

        self._save_button = ctk.CTkButton(
            card,
            text="Salvar",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            command=self._handle_save,
        )
        self._save_button.pack(anchor="w", padx=PADDING_MD, pady=(PADDING_SM, PADDING_SM))

        self._message_label = ctk.CTkLabel(card, text="", font=FONT_SMALL, anchor="w")
        self._message_label.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))

    def _handle_save(self) -> None:
        values = {field: entry.get().strip() for field, entry in self._entries.items()}
        form = ProfileUpdate(
            nome_completo=values["nome_completo"],
            telefone=values["telefone"],
            nome_usuario=values["nome_usuario"] or None,
            foto=values["foto"] or None,
        )
        if self._save_button is not None:
            self._save_button.configure(text="Salvando...", state="disabled")

        def _save() -> None:
            result = self._resolver.update_user_profile(form)
            self.after(0, lambda: self._show_result(result))

        threading.Thread(target=_save, daemon=True).start()

    def _show_result(self, result: ProfileUpdateResult) -> None:
        if not self.winfo_exists():
            return
        if self._save_button is not None:
            self._save_button.configure(text="Salvar", state="normal")
        if self._message_label is not None:
            self._message_label.configure(
                text=result.message,
                text_color=SUCCESS_TEXT if result.success else ERROR_TEXT,
            )
