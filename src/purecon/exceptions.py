"""Exception hierarchy for purecon."""

from __future__ import annotations


class PureconError(Exception):
    """Base exception for purecon errors."""


class ConsoleInputError(PureconError):
    """Raised when console input is requested after the input stream ended."""
