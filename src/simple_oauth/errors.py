"""
Exceptions raised while building, parsing and validating OAuth headers.
"""

from __future__ import annotations

from typing import Iterable


class SimpleOAuthError(ValueError):
    """Base class for all errors raised by simple_oauth."""


class ParseError(SimpleOAuthError):
    """
    An Authorization header does not match the ``OAuth key="value", ...`` grammar.

    Attributes:
        position: Offset into the header where parsing stopped (None when the
            scheme prefix itself is missing)
        remaining: The unparsed text starting at ``position``
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        remaining: str | None = None,
    ):
        super().__init__(message)
        self.position = position
        self.remaining = remaining


MalformedHeaderError = ParseError


class InvalidOptionsError(SimpleOAuthError):
    """Options contain keys that are neither OAuth attributes nor known secrets."""

    def __init__(self, keys: Iterable[str]):
        self.keys = list(keys)
        super().__init__(
            "Found extra option keys not matching ATTRIBUTE_KEYS:\n"
            f"  [{', '.join(repr(k) for k in self.keys)}]"
        )


class UnknownSignatureMethodError(SimpleOAuthError):
    """The requested signature method is not registered."""

    def __init__(self, method: str, registered: Iterable[str]):
        self.method = method
        self.registered = list(registered)
        super().__init__(
            f"Unknown signature method: {method}. "
            f"Registered methods: {', '.join(self.registered)}"
        )
