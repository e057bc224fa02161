"""Packaged slide deck (``deck.md``)."""
