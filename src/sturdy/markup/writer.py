"""Turn a `Deck` back into Markdown.

Two renditions are available:

- `dump_deck` reassembles the verbatim text the deck was parsed from. For
  any text ``t`` that parses, ``dump_deck(parse_deck(t)) == t``.
- `format_deck` writes a canonical form: front matter re-serialised with
  PyYAML, every delimiter written as ``---`` between blank lines, and slide
  bodies trimmed of leading/trailing blank lines. Slide count, order,
  content and directives survive a canonical round trip.
"""

from __future__ import annotations

import logging
import re
from os import PathLike
from pathlib import Path

import yaml

from sturdy.domain.models import Deck, FrontMatter

logger = logging.getLogger(__name__)

DELIMITER = "---"
SLIDE_SEPARATOR = f"\n{DELIMITER}\n\n"
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def dump_deck(deck: Deck) -> str:
    """Return the verbatim Markdown for *deck*."""
    parts: list[str] = []
    if (fm := deck.front_matter) is not None:
        parts += [fm.opening, fm.raw, fm.closing]
    for slide in deck.slides:
        if slide.delimiter is not None:
            parts.append(slide.delimiter)
        parts.append(slide.body)
    return "".join(parts)


def format_deck(deck: Deck) -> str:
    """Return the canonical Markdown for *deck*.

    Example:
        A two-slide deck with ``marp: true`` front matter formats as::

            ---
            marp: true
            ---

            # First

            ---

            # Second
    """
    bodies = [strip_blank_lines(slide.body) for slide in deck.slides]
    text = SLIDE_SEPARATOR.join(f"{body}\n" if body else "" for body in bodies)
    if deck.front_matter is not None:
        text = f"{_format_front_matter(deck.front_matter)}\n{text}"
    return text


def write_deck(
    deck: Deck, path: str | PathLike[str], *, canonical: bool = False
) -> Path:
    """Write *deck* to *path* as UTF-8 and return the path.

    Args:
        deck: Deck to write.
        path: Destination file; parent directories are created.
        canonical: Write `format_deck` output instead of the verbatim text.
    """
    path = Path(path)
    text = format_deck(deck) if canonical else dump_deck(deck)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fp:
        fp.write(text)
    logger.info(
        "Wrote %d slide(s) to %s (%s)",
        len(deck),
        path,
        "canonical" if canonical else "verbatim",
    )
    return path


def strip_blank_lines(body: str) -> str:
    """Drop leading and trailing whitespace-only lines; join the rest with ``\\n``."""
    lines = LINE_BREAK_RE.split(body)
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def _format_front_matter(front_matter: FrontMatter) -> str:
    directives = dict(front_matter.directives)
    block = (
        yaml.safe_dump(
            directives,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        if directives
        else ""
    )
    return f"{DELIMITER}\n{block}{DELIMITER}\n"
