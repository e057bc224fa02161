"""Illustrative code the slide deck is about."""
