"""Split Marp-flavoured Markdown into a `Deck`.

The parser understands exactly as much Markdown as it needs to find slide
boundaries and describe each slide:

- an optional YAML front-matter block opened by a ``---`` first line;
- thematic breaks (``---``, ``***``, ``___``) as slide delimiters, except a
  ``-`` ruler directly under paragraph text, which is a setext heading;
- fenced code blocks and HTML comment blocks, inside which nothing is a
  delimiter;
- ATX and setext headings (slide titles), list items (bullets) and HTML
  comments (directives or presenter notes).

Slides keep their verbatim text, so `sturdy.markup.writer.dump_deck` can
rebuild the source exactly.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

import yaml

from sturdy.domain.errors import (
    DeckNotFoundError,
    DeckReadError,
    FrontMatterError,
    UnterminatedCodeFenceError,
)
from sturdy.domain.models import CodeBlock, Deck, FrontMatter, Slide, is_known_directive

logger = logging.getLogger(__name__)

FRONT_MATTER_FENCE = "---"

LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")
RULER_RE = re.compile(r"^ {0,3}(?:(?:-[ \t]*){3,}|(?:\*[ \t]*){3,}|(?:_[ \t]*){3,})$")
FENCE_OPEN_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>.*)$")
ATX_HEADING_RE = re.compile(r"^ {0,3}#{1,6}(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")
SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(?:=+|-+)[ \t]*$")
LIST_ITEM_RE = re.compile(r"^[ \t]*(?:[-*+]|\d{1,9}[.)])[ \t]+(?P<text>\S.*)$")
BLOCK_START_RE = re.compile(r"^ {0,3}(?:>|<|\||#{1,6}(?:[ \t]|$))")
HTML_COMMENT_RE = re.compile(r"<!--(?P<content>.*?)-->", re.DOTALL)
COMMENT_BLOCK_OPEN_RE = re.compile(r"^ {0,3}<!--(?P<rest>.*)$")

# Marp reads `backgroundColor: #fff` as a colour, not as a YAML comment.
LOOSE_VALUE_RE = re.compile(
    r"^(?P<key>[ \t]*[A-Za-z_$][\w$-]*[ \t]*:[ \t]+)(?P<value>#.*?)[ \t]*$",
    re.MULTILINE,
)


@dataclass
class _Fence:
    marker: str
    language: str
    line: int

    def closed_by(self, content: str) -> bool:
        stripped = content.strip()
        return (
            len(content) - len(content.lstrip(" ")) <= 3
            and stripped.startswith(self.marker)
            and set(stripped) == {self.marker[0]}
        )


@dataclass
class _Chunk:
    delimiter: str | None
    start_line: int
    lines: list[str] = field(default_factory=list)


# ============================================================================
#                               Public API
# ============================================================================


def parse_deck(text: str, source: Path | None = None) -> Deck:
    """Parse deck markup into a `Deck`.

    Args:
        text: Full deck source.
        source: Optional path the text was read from; kept on the deck.

    Returns:
        Deck: The front matter (if any) and every slide, in order.

    Raises:
        FrontMatterError: If the front matter is unterminated, invalid YAML,
            or not a mapping.
        UnterminatedCodeFenceError: If a fenced code block never closes.
    """
    lines = LINE_RE.findall(text)
    front_matter, offset = _split_front_matter(lines)
    slides = tuple(
        _build_slide(index, chunk)
        for index, chunk in enumerate(_split_slides(lines, offset))
    )
    logger.debug(
        "Parsed %d slide(s) from %s (front matter: %s)",
        len(slides),
        source or "<text>",
        "yes" if front_matter is not None else "no",
    )
    return Deck(slides=slides, front_matter=front_matter, source=source, text=text)


def load_deck(path: str | PathLike[str]) -> Deck:
    """Read a UTF-8 deck file and parse it.

    Line endings are preserved so the deck can be written back unchanged.

    Raises:
        DeckNotFoundError: If *path* does not exist.
        DeckReadError: If *path* cannot be opened or is not valid UTF-8.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8", newline="") as fp:
            text = fp.read()
    except FileNotFoundError as e:
        raise DeckNotFoundError(path) from e
    except UnicodeDecodeError as e:
        raise DeckReadError(path, f"not valid UTF-8 at byte {e.start}") from e
    except OSError as e:
        raise DeckReadError(path, e.strerror or str(e)) from e
    logger.info("Loaded deck %s (%d bytes)", path, len(text))
    return parse_deck(text, source=path)


def load_directives(text: str) -> Any:
    """Load a YAML directive block the way Marp does.

    Values starting with ``#`` are read as strings instead of comments, so
    ``backgroundColor: #fff`` yields ``"#fff"``. CRLF and CR line endings
    read the same as LF.

    Raises:
        yaml.YAMLError: If the block is not valid YAML.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return yaml.safe_load(LOOSE_VALUE_RE.sub(_quote_loose_value, text))


# ============================================================================
#                               Internal Helpers
# ============================================================================


def _quote_loose_value(match: re.Match[str]) -> str:
    value = match.group("value").replace("'", "''")
    return f"{match.group('key')}'{value}'"


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _split_front_matter(lines: list[str]) -> tuple[FrontMatter | None, int]:
    if not lines or _strip_eol(lines[0]).rstrip() != FRONT_MATTER_FENCE:
        return None, 0
    for i in range(1, len(lines)):
        if _strip_eol(lines[i]).rstrip() == FRONT_MATTER_FENCE:
            raw = "".join(lines[1:i])
            front_matter = FrontMatter(
                raw=raw,
                directives=_load_front_matter(raw),
                opening=lines[0],
                closing=lines[i],
            )
            return front_matter, i + 1
    raise FrontMatterError("front matter is never closed", 1)


def _load_front_matter(raw: str) -> dict[str, Any]:
    try:
        data = load_directives(raw)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        # +2: the opening fence is line 1 and marks are 0-based
        line = mark.line + 2 if mark is not None else 1
        problem = getattr(e, "problem", None) or "invalid YAML"
        raise FrontMatterError(f"front matter: {problem}", line) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"front matter must be a mapping, got {type(data).__name__}", 2
        )
    return data


def _open_fence(content: str, line: int) -> _Fence | None:
    if not (match := FENCE_OPEN_RE.match(content)):
        return None
    marker, info = match.group("fence"), match.group("info").strip()
    if marker[0] == "`" and "`" in info:  # an inline code span, not a fence
        return None
    language = info.split()[0] if info else ""
    return _Fence(marker=marker, language=language, line=line)


def _is_paragraph_line(content: str) -> bool:
    return bool(content.strip()) and not (
        BLOCK_START_RE.match(content) or LIST_ITEM_RE.match(content)
    )


def _split_slides(lines: list[str], offset: int) -> list[_Chunk]:
    chunks = [_Chunk(delimiter=None, start_line=offset + 1)]
    fence: _Fence | None = None
    in_comment = False
    after_paragraph = False

    for lineno, line in enumerate(lines[offset:], start=offset + 1):
        content = _strip_eol(line)
        current = chunks[-1]

        if in_comment:
            in_comment = "-->" not in content
            current.lines.append(line)
            continue

        if fence is not None:
            if fence.closed_by(content):
                fence = None
            current.lines.append(line)
            continue

        if comment := COMMENT_BLOCK_OPEN_RE.match(content):
            # an HTML block runs to the line that closes the comment
            in_comment = "-->" not in comment.group("rest")
            after_paragraph = False
            current.lines.append(line)
            continue

        if opened := _open_fence(content, lineno):
            fence = opened
            after_paragraph = False
            current.lines.append(line)
            continue

        underline = after_paragraph and bool(SETEXT_UNDERLINE_RE.match(content))
        if RULER_RE.match(content) and not underline:
            chunks.append(_Chunk(delimiter=line, start_line=lineno + 1))
            after_paragraph = False
            continue

        current.lines.append(line)
        after_paragraph = not underline and _is_paragraph_line(content)

    if fence is not None:
        raise UnterminatedCodeFenceError(fence.marker, fence.line)
    return chunks


def _build_slide(index: int, chunk: _Chunk) -> Slide:
    blocks: list[CodeBlock] = []
    prose: list[str] = []
    fence: _Fence | None = None
    code: list[str] = []
    in_comment = False

    for lineno, line in enumerate(chunk.lines, start=chunk.start_line):
        content = _strip_eol(line)
        if in_comment:
            in_comment = "-->" not in content
            prose.append(content)
            continue
        if fence is not None:
            if fence.closed_by(content):
                blocks.append(CodeBlock(fence.language, "".join(code), fence.line))
                fence, code = None, []
            else:
                code.append(line)
            prose.append("")
            continue
        if comment := COMMENT_BLOCK_OPEN_RE.match(content):
            in_comment = "-->" not in comment.group("rest")
            prose.append(content)
            continue
        if opened := _open_fence(content, lineno):
            fence = opened
            prose.append("")
            continue
        prose.append(content)

    prose_text = "\n".join(prose)
    directives, notes = _read_comments(prose_text)
    visible = HTML_COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), prose_text)
    title, bullets = _scan_prose(visible.split("\n"))

    return Slide(
        index=index,
        body="".join(chunk.lines),
        delimiter=chunk.delimiter,
        start_line=chunk.start_line,
        title=title,
        bullets=tuple(bullets),
        code_blocks=tuple(blocks),
        directives=directives,
        notes=tuple(notes),
    )


def _scan_prose(lines: list[str]) -> tuple[str | None, list[str]]:
    title: str | None = None
    bullets: list[str] = []
    paragraph: list[str] = []

    for content in lines:
        if paragraph and SETEXT_UNDERLINE_RE.match(content):
            if title is None:
                title = " ".join(part.strip() for part in paragraph)
            paragraph = []
            continue
        if title is None and (heading := ATX_HEADING_RE.match(content)):
            title = (heading.group("text") or "").strip()
        if item := LIST_ITEM_RE.match(content):
            if not RULER_RE.match(content):
                bullets.append(item.group("text").strip())
        if _is_paragraph_line(content):
            paragraph.append(content)
        else:
            paragraph = []

    return title, bullets


def _read_comments(text: str) -> tuple[dict[str, Any], list[str]]:
    directives: dict[str, Any] = {}
    notes: list[str] = []
    for match in HTML_COMMENT_RE.finditer(text):
        content = match.group("content")
        if (parsed := _parse_directive_comment(content)) is not None:
            directives.update(parsed)
        elif note := content.strip():
            notes.append(note)
    return directives, notes


def _parse_directive_comment(content: str) -> dict[str, Any] | None:
    try:
        data = load_directives(content)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict) or not data:
        return None
    if not all(isinstance(key, str) and is_known_directive(key) for key in data):
        return None
    return data
