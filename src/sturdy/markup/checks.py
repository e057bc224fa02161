"""Structural sanity checks for a parsed deck.

Each check yields `Finding` objects; nothing here raises for a bad deck.
Errors mean the deck will not render as intended; warnings flag style
problems (empty slides, missing titles, unlabeled code).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from sturdy.domain.models import Deck, is_known_directive

from .writer import dump_deck

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_DIRECTIVES = ("marp",)


class Severity(Enum):
    """How serious a finding is."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Finding:
    """A single problem found in a deck.

    Attributes:
        severity: Error or warning.
        slide_index: 0-based slide the finding refers to, or ``None`` for
            deck-wide findings.
        code: Short kebab-case identifier, e.g. ``"empty-slide"``.
        message: Human-readable description.
    """

    severity: Severity
    slide_index: int | None
    code: str
    message: str

    def __str__(self) -> str:
        where = "deck" if self.slide_index is None else f"slide {self.slide_index + 1}"
        return f"{self.severity.value}: {where}: {self.message} [{self.code}]"


def check_deck(
    deck: Deck, *, required_directives: Iterable[str] = DEFAULT_REQUIRED_DIRECTIVES
) -> list[Finding]:
    """Run every structural check against *deck*.

    Args:
        deck: The deck to inspect.
        required_directives: Front-matter keys that must be present.

    Returns:
        list[Finding]: Findings in a stable order (deck-wide first, then by slide).
    """
    findings = [
        *_check_front_matter(deck, tuple(required_directives)),
        *_check_round_trip(deck),
        *_check_slides(deck),
    ]
    logger.debug(
        "Deck check produced %d finding(s) (%d error(s))",
        len(findings),
        sum(f.severity is Severity.ERROR for f in findings),
    )
    return findings


def has_errors(findings: Iterable[Finding]) -> bool:
    """Return True if any finding is an error."""
    return any(f.severity is Severity.ERROR for f in findings)


# ============================================================================
#                               Individual checks
# ============================================================================


def _check_front_matter(deck: Deck, required: tuple[str, ...]) -> Iterator[Finding]:
    if deck.front_matter is None:
        yield Finding(
            Severity.WARNING, None, "missing-front-matter", "deck has no front matter"
        )
        directives = {}
    else:
        directives = deck.front_matter.directives

    for key in required:
        if key not in directives:
            yield Finding(
                Severity.ERROR,
                None,
                "missing-directive",
                f"front matter does not set {key!r}",
            )

    for key in directives:
        if not (isinstance(key, str) and is_known_directive(key)):
            yield Finding(
                Severity.WARNING,
                None,
                "unknown-directive",
                f"{key!r} is not a Marp directive",
            )


def _check_round_trip(deck: Deck) -> Iterator[Finding]:
    if deck.text is not None and dump_deck(deck) != deck.text:
        yield Finding(
            Severity.ERROR,
            None,
            "round-trip",
            "writing the deck back does not reproduce its source text",
        )


def _check_slides(deck: Deck) -> Iterator[Finding]:
    for slide in deck:
        if slide.is_blank:
            yield Finding(
                Severity.WARNING, slide.index, "empty-slide", "slide is empty"
            )
            continue

        if slide.title is None and "class" not in deck.local_directives(slide.index):
            yield Finding(
                Severity.WARNING, slide.index, "untitled-slide", "slide has no heading"
            )

        for block in slide.code_blocks:
            if not block.language:
                yield Finding(
                    Severity.WARNING,
                    slide.index,
                    "unlabeled-code-block",
                    f"code block at line {block.line} has no language",
                )
