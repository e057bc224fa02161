"""STURDY

A Marp slide deck on writing non-brittle unit tests, plus the tooling that
keeps it honest: a deck parser and writer, structural checks, a snippet
extractor, and the illustrative watchdog routine the slides talk about.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
