"""Reading, writing and checking Marp Markdown decks."""

from .checks import Finding, Severity, check_deck, has_errors
from .parser import load_deck, load_directives, parse_deck
from .snippets import SnippetFailure, compile_snippets, iter_code_blocks
from .writer import dump_deck, format_deck, write_deck

__all__ = [
    "Finding",
    "Severity",
    "SnippetFailure",
    "check_deck",
    "compile_snippets",
    "dump_deck",
    "format_deck",
    "has_errors",
    "iter_code_blocks",
    "load_deck",
    "load_directives",
    "parse_deck",
    "write_deck",
]
