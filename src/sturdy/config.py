"""Configuration utilities for STURDY.

This module centralizes small helpers and constants related to locating the
slide deck.
"""

import os
from importlib.resources import files
from pathlib import Path

DECK_PATH_ENV = "STURDY_DECK_PATH"  # pragma: no mutate
DECK_RESOURCE = "deck.md"  # pragma: no mutate


def default_deck_path() -> Path:
    """Return the path of the deck packaged with STURDY."""
    return Path(str(files("sturdy.content").joinpath(DECK_RESOURCE)))


def get_deck_path() -> Path:
    """Get the deck location from the environment, falling back to the packaged deck.

    Returns:
        The value of `STURDY_DECK_PATH` if set and non-empty, otherwise
        `default_deck_path()`.
    """
    if path := os.environ.get(DECK_PATH_ENV):
        return Path(path)
    return default_deck_path()
