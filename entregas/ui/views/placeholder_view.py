"""Placeholder View.

Stand-in page for sections whose content is not part of the desktop
dashboard yet (home, reports, courier management, admin).
"""

from __future__ import annotations

import customtkinter as ctk

from entregas.ui.theme import (
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BODY,
    FONT_HEADING,
    PADDING_LG,
    PADDING_MD,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


class PlaceholderView(ctk.CTkFrame):
    """Heading plus a one-line description."""

    def __init__(self, parent: ctk.CTkFrame, title: str, description: str = "") -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        card = ctk.CTkFrame(self, fg_color=CONTENT_CARD_BG, corner_radius=CORNER_RADIUS)
        card.pack(padx=PADDING_LG, pady=PADDING_LG, fill="x")

        ctk.CTkLabel(
            card,
            text=title,
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))
        ctk.CTkLabel(
            card,
            text=description or "Em breve.",
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))
