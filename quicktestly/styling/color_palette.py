"""Color palette for the teacher console, light and dark variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """One color expressed for both themes."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#111827", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#6B7280", dark="#AAAAAA")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_ALTERNATE = ThemeColors(light="#F3F4F6", dark="#2D2D2D")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#1F9AA5", dark="#3CC3CE")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E5E7EB", dark="#505050")

    STATUS_ERROR = ThemeColors(light="#B91C1C", dark="#FF6B6B")

    # Grade badges in the results view
    GRADE_A = ThemeColors(light="#15803D", dark="#6FCF6F")
    GRADE_B = ThemeColors(light="#0E7490", dark="#4FD1E0")
    GRADE_C = ThemeColors(light="#B45309", dark="#FFC83D")
    GRADE_D = ThemeColors(light="#B91C1C", dark="#FF6B6B")

    @classmethod
    def for_grade(cls, grade: str) -> ThemeColors:
        return {
            "A": cls.GRADE_A,
            "B": cls.GRADE_B,
            "C": cls.GRADE_C,
        }.get(grade, cls.GRADE_D)
