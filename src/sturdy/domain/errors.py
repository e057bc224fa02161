"""Domain-layer error definitions."""

from pathlib import Path

# ============================================================================
#                           General deck errors
# ============================================================================


class DeckError(Exception):
    """Base class for deck-related errors."""


class DeckNotFoundError(DeckError):
    """Raised when a deck file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Deck file '{path}' does not exist.")
        self.path = path


class DeckReadError(DeckError):
    """Raised when a deck file exists but cannot be read as UTF-8 text."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Deck file '{path}' cannot be read: {reason}.")
        self.path = path
        self.reason = reason


class SlideIndexError(DeckError, IndexError):
    """Raised when a slide index falls outside the deck."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"Slide {index} is out of range (deck has {count} slides).")
        self.index = index
        self.count = count


# ============================================================================
#                           Markup errors
# ============================================================================


class DeckSyntaxError(DeckError):
    """Raised when deck markup cannot be split into slides."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


class FrontMatterError(DeckSyntaxError):
    """Raised when the front-matter block is unterminated or not a mapping."""


class UnterminatedCodeFenceError(DeckSyntaxError):
    """Raised when a fenced code block is opened and never closed."""

    def __init__(self, fence: str, line: int) -> None:
        super().__init__(f"code fence {fence!r} is never closed", line)
        self.fence = fence
