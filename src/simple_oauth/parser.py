"""
Authorization header and form body parsing.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

import httpx

from .encoding import unescape
from .errors import ParseError

OAUTH_PREFIX = "oauth_"

# Scheme prefix: "OAuth" followed by at least one whitespace character
SCHEME_PATTERN = re.compile(r"OAuth\s+", re.ASCII)

# One key="value" pair plus its separator. The value may contain commas;
# only a comma after the closing quote separates pairs.
PARAM_PATTERN = re.compile(r'(\w+)="([^"]*)"\s*(,?)\s*', re.ASCII)


class HeaderParser:
    """
    Strict scanner for ``OAuth key="value", key="value"`` headers.

    Args:
        header: Authorization header value (anything with a ``str()``)

    Example:
        >>> HeaderParser('OAuth oauth_token="abc", oauth_nonce="n"').parse(["token"])
        {'token': 'abc'}
    """

    def __init__(self, header: Any):
        self.header = "" if header is None else str(header)
        self.pos = 0
        self.attributes: dict[str, str] = {}

    def parse(self, valid_keys: Iterable[str], keep_realm: bool = False) -> dict[str, str]:
        """
        Parse the header into a mapping of bare attribute names to decoded values.

        Only ``oauth_<key>`` pairs whose ``<key>`` is in ``valid_keys`` are kept.
        With ``keep_realm``, an unprefixed ``realm`` pair is kept as well. Every
        other pair is dropped without error.

        Raises:
            ParseError: If the header is malformed
        """
        valid = frozenset(valid_keys)
        self._scan_scheme()
        self._scan_params(valid, keep_realm)
        self._verify_complete()
        return self.attributes

    def _scan_scheme(self) -> None:
        match = SCHEME_PATTERN.match(self.header)
        if not match:
            raise ParseError("Authorization header must start with 'OAuth '")
        self.pos = match.end()

    def _scan_params(self, valid: frozenset[str], keep_realm: bool) -> None:
        while True:
            match = PARAM_PATTERN.match(self.header, self.pos)
            if not match:
                return
            key, value, comma = match.groups()
            self.pos = match.end()
            self._validate_comma_separator(key, comma)
            self._store_if_valid(key, value, valid, keep_realm)

    def _validate_comma_separator(self, key: str, comma: str) -> None:
        if comma or self._eos():
            return
        rest = self.header[self.pos:]
        raise ParseError(
            f"Expected comma after '{key}' parameter at position {self.pos}: {rest!r}",
            position=self.pos,
            remaining=rest,
        )

    def _store_if_valid(self, key: str, value: str, valid: frozenset[str], keep_realm: bool) -> None:
        if key.startswith(OAUTH_PREFIX):
            bare = key[len(OAUTH_PREFIX):]
            if bare in valid:
                self.attributes[bare] = unescape(value)
        elif keep_realm and key == "realm":
            self.attributes[key] = unescape(value)

    def _verify_complete(self) -> None:
        if self._eos():
            return
        rest = self.header[self.pos:]
        raise ParseError(
            f"Could not parse parameter at position {self.pos}: {rest!r}",
            position=self.pos,
            remaining=rest,
        )

    def _eos(self) -> bool:
        return self.pos >= len(self.header)


def parse_header(header: Any, valid_keys: Iterable[str], keep_realm: bool = False) -> dict[str, str]:
    """Parse an ``OAuth ...`` Authorization header. See HeaderParser.parse."""
    return HeaderParser(header).parse(valid_keys, keep_realm=keep_realm)


def parse_form_body(body: Any, valid_keys: Iterable[str]) -> dict[str, str]:
    """
    Extract OAuth credentials from an ``application/x-www-form-urlencoded`` body.

    ``+`` decodes to a space and ``%XX`` sequences are decoded. For repeated
    keys the first value wins. A pair without ``=`` yields an empty value.
    Only ``oauth_<key>`` names with ``<key>`` in ``valid_keys`` are kept.

    Examples:
        >>> parse_form_body("oauth_token=abc&status=hi", ["token"])
        {'token': 'abc'}
    """
    if body is None:
        return {}
    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8", errors="replace")

    valid = frozenset(valid_keys)
    result: dict[str, str] = {}
    for key, value in httpx.QueryParams(str(body)).multi_items():
        if not key.startswith(OAUTH_PREFIX):
            continue
        bare = key[len(OAUTH_PREFIX):]
        if bare in valid and bare not in result:
            result[bare] = value
    return result
