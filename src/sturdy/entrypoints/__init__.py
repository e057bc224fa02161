"""Entrypoints (inbound adapters) for STURDY.

Expose the deck tooling to the outside world. Currently only the CLI: parse
and validate inputs, call into `sturdy.markup`, and present results.
"""
