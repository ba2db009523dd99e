"""Styling module for the QuickTestly teacher console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
