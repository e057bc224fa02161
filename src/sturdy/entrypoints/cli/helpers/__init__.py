"""CLI helpers for STURDY.

OSC-8 terminal hyperlinks when supported, ``NAME=LEVEL`` option parsing, and
message emitters that write to stderr with emoji→ASCII fallbacks.
"""

from .hyperlinks import hyperlink
from .messages import error, success, warn

__all__ = ["error", "hyperlink", "success", "warn"]
