"""UI Theme Constants for the EntregasWoo dashboard.

Purple sidebar + light content area, matching the web dashboard's brand.

This file contains **zero logic**, only ``Final`` constants.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

SIDEBAR_BG: Final[str] = "#553c9a"
SIDEBAR_HOVER: Final[str] = "#44337a"
SIDEBAR_ACTIVE: Final[str] = "#322659"
SIDEBAR_TEXT: Final[str] = "#ffffff"
SIDEBAR_MUTED: Final[str] = "#d6bcfa"

CONTENT_BG: Final[str] = "#f7fafc"
CONTENT_CARD_BG: Final[str] = "#ffffff"

ACCENT_PRIMARY: Final[str] = "#6b46c1"
ACCENT_HOVER: Final[str] = "#553c9a"
TEXT_PRIMARY: Final[str] = "#1a202c"
TEXT_SECONDARY: Final[str] = "#718096"
TEXT_LIGHT: Final[str] = "#ffffff"

INPUT_BG: Final[str] = "#ffffff"
INPUT_BORDER: Final[str] = "#cbd5e0"

ERROR_TEXT: Final[str] = "#e53e3e"
SUCCESS_TEXT: Final[str] = "#38a169"
LOGOUT_PRIMARY: Final[str] = "#e53e3e"
LOGOUT_HOVER: Final[str] = "#c53030"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_SIDEBAR: Final[tuple[str, int]] = (FONT_FAMILY, 14)
FONT_SIDEBAR_ACTIVE: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

SIDEBAR_WIDTH: Final[int] = 256
MAIN_WINDOW_WIDTH: Final[int] = 1200
MAIN_WINDOW_HEIGHT: Final[int] = 750
CORNER_RADIUS: Final[int] = 8
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
