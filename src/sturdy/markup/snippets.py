"""Find and syntax-check the code blocks embedded in a deck."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from sturdy.domain.models import CodeBlock, Deck, Slide

logger = logging.getLogger(__name__)

PYTHON_LANGUAGES = frozenset({"python", "python3", "py"})


@dataclass(frozen=True)
class SnippetFailure:
    """A Python snippet that does not compile.

    Attributes:
        slide_index: 0-based slide holding the snippet.
        line: Deck source line of the snippet's opening fence.
        error: The `SyntaxError` raised by `compile`.
    """

    slide_index: int
    line: int
    error: SyntaxError

    def __str__(self) -> str:
        # error.lineno is relative to the snippet; the fence sits one line above it
        where = self.line + (self.error.lineno or 1)
        return f"slide {self.slide_index + 1}, line {where}: {self.error.msg}"


def iter_code_blocks(
    deck: Deck, language: str | None = None
) -> Iterator[tuple[Slide, CodeBlock]]:
    """Yield ``(slide, block)`` pairs in deck order.

    Args:
        deck: Deck to search.
        language: Only yield blocks labeled with this language
            (case-insensitive). ``None`` yields every block.
    """
    wanted = language.lower() if language is not None else None
    for slide in deck:
        for block in slide.code_blocks:
            if wanted is None or block.language.lower() == wanted:
                yield slide, block


def compile_snippets(deck: Deck) -> list[SnippetFailure]:
    """Byte-compile every Python code block; return the ones that fail.

    Snippets are compiled, never executed.
    """
    failures: list[SnippetFailure] = []
    checked = 0
    for slide, block in iter_code_blocks(deck):
        if block.language.lower() not in PYTHON_LANGUAGES:
            continue
        checked += 1
        filename = f"<slide {slide.index + 1}>"
        try:
            compile(block.code, filename, "exec")
        except SyntaxError as e:
            logger.debug("Snippet on %s failed to compile: %s", filename, e)
            failures.append(SnippetFailure(slide.index, block.line, e))
    logger.info(
        "Compiled %d Python snippet(s), %d failure(s)", checked, len(failures)
    )
    return failures
