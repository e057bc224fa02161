"""Deck data model and domain errors."""

from .errors import (
    DeckError,
    DeckNotFoundError,
    DeckReadError,
    DeckSyntaxError,
    FrontMatterError,
    SlideIndexError,
    UnterminatedCodeFenceError,
)
from .models import CodeBlock, Deck, FrontMatter, Slide

__all__ = [
    "CodeBlock",
    "Deck",
    "DeckError",
    "DeckNotFoundError",
    "DeckReadError",
    "DeckSyntaxError",
    "FrontMatter",
    "FrontMatterError",
    "Slide",
    "SlideIndexError",
    "UnterminatedCodeFenceError",
]
