"""
Palette — the colors and glyphs the secretsweep widgets render with.

Passed into the app at construction; widgets read it, nothing mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    accent: str = "#ff87af"
    highlight: str = "#5f00ff"
    selected: str = "#ffffaf"
    muted: str = "#585858"
    stale: str = "#ffaf00"
    error: str = "#ff0000"
    success: str = "#00ff00"
    checked: str = "[×]"
    unchecked: str = "[ ]"


DEFAULT_PALETTE = Palette()
