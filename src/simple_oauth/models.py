"""
Sources of OAuth options for a Header.

A header is either built from explicit credentials, or wraps an incoming
request whose credentials come from an Authorization header or a form body.
The caller picks the variant; nothing is inferred from runtime types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class ExplicitOptions:
    """
    Credentials supplied by the caller.

    Attributes:
        values: Option mapping (consumer_key, consumer_secret, token, ...)
        use_defaults: Merge the values over a fresh nonce, timestamp,
            version and signature method
    """
    values: Mapping[str, Any] = field(default_factory=dict)
    use_defaults: bool = True


@dataclass(frozen=True)
class HeaderOptions:
    """
    Credentials parsed from an ``Authorization: OAuth ...`` header.

    Attributes:
        authorization: The header value
    """
    authorization: str


@dataclass(frozen=True)
class FormBodyOptions:
    """
    Credentials parsed from an ``application/x-www-form-urlencoded`` body.

    Attributes:
        body: The raw form body
    """
    body: str | bytes


OAuthOptions = Union[ExplicitOptions, HeaderOptions, FormBodyOptions]
