import sys

from wasmpack import emoji
from wasmpack.emoji import Emoji


def test_render_fancy_and_plain():
    assert emoji.SPARKLE.render(True) == "✨  "
    assert emoji.SPARKLE.render(False) == ":-)"
    assert emoji.SHEEP.render(False) == ""


def test_render_picks_the_given_field():
    item = Emoji("X ", "x")
    assert item.render(True) == item.fancy
    assert item.render(False) == item.plain


def test_str_on_unix_is_fancy(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert str(emoji.PACKAGE) == emoji.PACKAGE.render(True)
    assert str(emoji.PACKAGE) == "📦  "


def test_str_on_windows_is_plain(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    assert str(emoji.WARN) == emoji.WARN.render(False)
    assert str(emoji.WARN) == ":-)"