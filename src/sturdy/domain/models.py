"""Value objects describing a parsed Marp slide deck.

A deck is an optional front-matter block followed by an ordered sequence of
slides. Every object here keeps the verbatim text it was parsed from, so a
deck can be written back byte-for-byte (see `sturdy.markup.writer`).

Directives follow Marp's scoping rules:

- **Global** directives (``theme``, ``size``, ...) apply to the whole deck,
  wherever they are set.
- **Local** directives (``paginate``, ``class``, ``backgroundColor``, ...)
  apply to the slide that sets them and every slide after it.
- **Spot** directives are local directives prefixed with ``_``; they apply to
  a single slide only.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import SlideIndexError

GLOBAL_DIRECTIVES = frozenset(
    {
        "marp",
        "theme",
        "style",
        "headingDivider",
        "lang",
        "size",
        "math",
        "title",
        "author",
        "description",
        "keywords",
        "url",
        "image",
    }
)
LOCAL_DIRECTIVES = frozenset(
    {
        "paginate",
        "header",
        "footer",
        "class",
        "backgroundColor",
        "backgroundImage",
        "backgroundPosition",
        "backgroundRepeat",
        "backgroundSize",
        "color",
        "transition",
    }
)
SPOT_PREFIX = "_"


def is_known_directive(key: str) -> bool:
    """Return True if *key* is a Marp global, local or spot directive name."""
    if key.startswith(SPOT_PREFIX):
        return key[len(SPOT_PREFIX) :] in LOCAL_DIRECTIVES
    return key in GLOBAL_DIRECTIVES or key in LOCAL_DIRECTIVES


@dataclass(frozen=True)
class FrontMatter:
    """The YAML block at the top of a deck.

    Attributes:
        raw: Verbatim text between the opening and closing ``---`` lines.
        directives: Mapping parsed from ``raw``.
        opening: Verbatim opening delimiter line, line ending included.
        closing: Verbatim closing delimiter line, line ending included.
    """

    raw: str
    directives: Mapping[str, Any] = field(default_factory=dict)
    opening: str = "---\n"
    closing: str = "---\n"

    @property
    def marp(self) -> bool:
        """Whether the deck opts into Marp rendering."""
        return bool(self.directives.get("marp", False))

    @property
    def theme(self) -> str | None:
        """Name of the deck theme, if any."""
        return self.directives.get("theme")

    @property
    def paginate(self) -> bool:
        """Whether page numbers are shown by default."""
        return bool(self.directives.get("paginate", False))

    @property
    def background_color(self) -> str | None:
        """Default slide background colour, if any."""
        return self.directives.get("backgroundColor")


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block inside a slide.

    Attributes:
        language: First word of the fence's info string; empty if unlabeled.
        code: Block content without the fences.
        line: 1-based line of the opening fence in the deck source.
    """

    language: str
    code: str
    line: int


@dataclass(frozen=True)
class Slide:  # pylint: disable=too-many-instance-attributes
    """One slide of a deck.

    Attributes:
        index: 0-based position in the deck.
        body: Verbatim slide text, delimiters excluded.
        delimiter: Verbatim ruler line that opened the slide; ``None`` for the
            first slide.
        start_line: 1-based source line where ``body`` starts.
        title: Text of the first heading, if any.
        bullets: Text of every list item, in order.
        code_blocks: Fenced code blocks, in order.
        directives: Directives set by HTML comments on this slide.
        notes: Presenter notes (HTML comments that are not directives).
    """

    index: int
    body: str
    delimiter: str | None = None
    start_line: int = 1
    title: str | None = None
    bullets: tuple[str, ...] = ()
    code_blocks: tuple[CodeBlock, ...] = ()
    directives: Mapping[str, Any] = field(default_factory=dict)
    notes: tuple[str, ...] = ()

    @property
    def is_blank(self) -> bool:
        """True if the slide has no visible content."""
        return not self.body.strip()


@dataclass(frozen=True)
class Deck:
    """An ordered sequence of slides with optional front matter.

    Attributes:
        slides: Slides in presentation order.
        front_matter: Parsed front matter, or ``None`` if the deck has none.
        source: Path the deck was loaded from, if any.
        text: Source text the deck was parsed from, if any.
    """

    slides: tuple[Slide, ...]
    front_matter: FrontMatter | None = None
    source: Path | None = None
    text: str | None = field(default=None, repr=False)

    def __len__(self) -> int:
        return len(self.slides)

    def __iter__(self) -> Iterator[Slide]:
        return iter(self.slides)

    def slide(self, index: int) -> Slide:
        """Return the slide at *index*.

        Raises:
            SlideIndexError: If *index* is negative or past the last slide.
        """
        if not 0 <= index < len(self.slides):
            raise SlideIndexError(index, len(self.slides))
        return self.slides[index]

    @property
    def titles(self) -> list[str | None]:
        """Slide titles in order (``None`` for untitled slides)."""
        return [slide.title for slide in self.slides]

    @property
    def global_directives(self) -> dict[str, Any]:
        """Global directives from front matter and slide comments; last one wins."""
        result: dict[str, Any] = {}
        if self.front_matter is not None:
            result.update(
                (k, v)
                for k, v in self.front_matter.directives.items()
                if k in GLOBAL_DIRECTIVES
            )
        for slide in self.slides:
            result.update(
                (k, v) for k, v in slide.directives.items() if k in GLOBAL_DIRECTIVES
            )
        return result

    def local_directives(self, index: int) -> dict[str, Any]:
        """Return the local directives in effect on slide *index*.

        Local directives are inherited from the front matter and every earlier
        slide; spot directives (``_class`` etc.) only count on their own slide
        and are returned without the ``_`` prefix.

        Raises:
            SlideIndexError: If *index* is out of range.
        """
        target = self.slide(index)
        inherited: dict[str, Any] = {}
        if self.front_matter is not None:
            inherited.update(
                (k, v)
                for k, v in self.front_matter.directives.items()
                if k in LOCAL_DIRECTIVES
            )
        for slide in self.slides[: index + 1]:
            inherited.update(
                (k, v) for k, v in slide.directives.items() if k in LOCAL_DIRECTIVES
            )
        for key, value in target.directives.items():
            if key.startswith(SPOT_PREFIX) and is_known_directive(key):
                inherited[key[len(SPOT_PREFIX) :]] = value
        return inherited
