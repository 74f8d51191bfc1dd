"""Emoji used in console messages, with plain-text fallbacks."""

from __future__ import annotations

import sys
from dataclasses import dataclass


def _wants_emoji() -> bool:
    return not sys.platform.startswith("win")


@dataclass(frozen=True)
class Emoji:
    """An emoji with the text shown where emoji are not wanted."""

    fancy: str
    plain: str

    def render(self, fancy: bool) -> str:
        """The emoji itself, or its fallback text."""
        return self.fancy if fancy else self.plain

    def __str__(self) -> str:
        return self.render(_wants_emoji())


TARGET = Emoji("🎯  ", "")
CYCLONE = Emoji("🌀  ", "")
FOLDER = Emoji("📂  ", "")
MEMO = Emoji("📝  ", "")
DOWN_ARROW = Emoji("⬇️  ", "")
RUNNER = Emoji("🏃‍♀️  ", "")
SPARKLE = Emoji("✨  ", ":-)")
PACKAGE = Emoji("📦  ", ":-)")
WARN = Emoji("⚠️  ", ":-)")
DANCERS = Emoji("👯  ", "")
ERROR = Emoji("⛔  ", "")
INFO = Emoji("ℹ️  ", "")
WRENCH = Emoji("🔧  ", "")
CRAB = Emoji("🦀  ", "")
SHEEP = Emoji("🐑 ", "")