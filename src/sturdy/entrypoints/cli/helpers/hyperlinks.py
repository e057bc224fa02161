"""OSC-8 terminal hyperlinks with a plain-text fallback."""

import os
import sys
from typing import TextIO

OSC8_PROGRAMS = frozenset({"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"})


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Guess whether *stream* (default: stdout) renders OSC-8 hyperlinks.

    Only TTYs qualify, and only in terminals known to support the sequence
    (VS Code, iTerm2, WezTerm, Kitty, Windows Terminal, VTE-based terminals,
    Alacritty, Konsole). Pagers may still strip the escapes.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    return bool(
        (os.getenv("TERM_PROGRAM") or "").lower() in OSC8_PROGRAMS
        or os.getenv("WT_SESSION")
        or os.getenv("VTE_VERSION")
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str) -> str:
    """Return *url* wrapped in a BEL-terminated OSC-8 link, or bare if unsupported."""
    if not supports_osc8():
        return url
    return f"\x1b]8;;{url}\x07{url}\x1b]8;;\x07"
