"""
OAuth percent-encoding (RFC 5849 section 3.6).
"""

from typing import Any
from urllib.parse import quote, unquote


def escape(value: Any) -> str:
    """
    Percent-encode a value for use in an OAuth signature or header.

    Everything except ``A-Z a-z 0-9 - . _ ~`` is encoded, one ``%XX`` triplet
    per UTF-8 byte with uppercase hex. Non-string values are converted with
    ``str()``; ``None`` encodes to the empty string.

    Examples:
        >>> escape("hello world")
        'hello%20world'
        >>> escape("é")
        '%C3%A9'
    """
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return quote(bytes(value), safe="")
    return quote(str(value), safe="")


def unescape(value: Any) -> str:
    """
    Decode a percent-encoded value. Characters that are not encoded pass through.

    ``+`` is left alone; only form bodies treat it as a space.
    """
    if value is None:
        return ""
    return unquote(str(value))


# Aliases kept for callers that use the encode/decode vocabulary
encode = escape
decode = unescape
