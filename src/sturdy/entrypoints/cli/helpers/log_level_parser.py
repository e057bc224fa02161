"""Parse ``NAME=LEVEL`` logger overrides given on the command line.

Values may come from a repeatable option (a tuple of strings) or from an
environment variable (one string with comma- or space-separated pairs).
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"click_extra": logging.WARNING}
SEPARATORS_RE = re.compile(r"[,\s]+")


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten *value* into non-empty ``NAME=LEVEL`` items.

    Args:
        value: One string, or a sequence of strings, each possibly holding
            several comma/space-separated items.

    Returns:
        list[str]: The individual items, in order.
    """
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in SEPARATORS_RE.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning ``NAME=LEVEL`` items into a ``{name: level}`` dict.

    Starts from `DEFAULT_LIB_LEVELS`; later items override earlier ones.
    Level names are case-insensitive.

    Raises:
        click.BadParameter: If an item has no ``=`` or names an unknown level.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_name.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = level
    return levels
