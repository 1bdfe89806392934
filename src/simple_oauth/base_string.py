"""
Signature base string construction (RFC 5849 section 3.4.1).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import httpx

from .encoding import escape

Pair = tuple[str, str]

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: Any) -> tuple[str, list[Pair]]:
    """
    Split a request URL into its base string URI and its query parameters.

    The scheme and host are lowercased, default ports are dropped and the
    query and fragment are removed from the base URI. Query parameters are
    grouped by name (first occurrence order) with each name's values sorted.

    Examples:
        >>> normalize_url("HTTPS://Photos.Example.NET:443/photos?size=b&size=a#top")
        ('https://photos.example.net/photos', [('size', 'a'), ('size', 'b')])
    """
    parsed = url if isinstance(url, httpx.URL) else httpx.URL(str(url))
    path = parsed.raw_path.split(b"?", 1)[0].decode("ascii")
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.decode("ascii")
    # httpx only drops a default port when the scheme was already lowercase
    if parsed.port is not None and parsed.port == DEFAULT_PORTS.get(scheme):
        netloc = netloc.rsplit(":", 1)[0]
    base = f"{scheme}://{netloc}{path}"

    grouped: dict[str, list[str]] = {}
    for key, value in httpx.QueryParams(parsed.query.decode("ascii")).multi_items():
        grouped.setdefault(key, []).append(value)

    query_pairs = [(key, value) for key, values in grouped.items() for value in sorted(values)]
    return base, query_pairs


def param_pairs(params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None) -> list[tuple[Any, Any]]:
    """
    Flatten request parameters into (key, value) pairs.

    A mapping value that is a list or tuple contributes one pair per element.
    """
    if not params:
        return []
    items = params.items() if isinstance(params, Mapping) else params

    pairs: list[tuple[Any, Any]] = []
    for key, value in items:
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, value))
    return pairs


def collect_params(
    attributes: Mapping[str, Any],
    body_params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None,
    url_params: Iterable[tuple[Any, Any]],
) -> list[tuple[Any, Any]]:
    """
    Concatenate OAuth attributes, request parameters and URL query parameters.

    Every occurrence is kept; duplicates across the groups are not merged.
    """
    return list(attributes.items()) + param_pairs(body_params) + list(url_params)


def normalize_params(pairs: Iterable[tuple[Any, Any]]) -> str:
    """
    Encode, sort and join parameters (RFC 5849 section 3.4.1.3.2).

    Keys and values are escaped first and the escaped pairs are sorted, so
    ordering follows the encoded form.

    Examples:
        >>> normalize_params([("b", "2"), ("a", "x y")])
        'a=x%20y&b=2'
    """
    encoded = sorted((escape(key), escape(value)) for key, value in pairs)
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base(method: str, url: str, normalized_params: str) -> str:
    """Join the escaped method, base URI and normalized parameters with ``&``."""
    return "&".join(escape(v) for v in (method, url, normalized_params))
