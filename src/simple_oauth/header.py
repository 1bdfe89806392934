"""
OAuth 1.0 Authorization header generation and validation.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from collections import ChainMap
from secrets import token_hex
from typing import Any, Iterable, Mapping

from . import parser
from .base_string import collect_params, normalize_params, normalize_url, signature_base
from .encoding import escape, unescape
from .errors import InvalidOptionsError
from .models import ExplicitOptions, FormBodyOptions, HeaderOptions, OAuthOptions
from .signature import SignatureRegistry, registry as default_registry

logger = logging.getLogger(__name__)

OAUTH_PREFIX = "oauth_"
OAUTH_VERSION = "1.0"
DEFAULT_SIGNATURE_METHOD = "HMAC-SHA1"
DEFAULT_BODY_HASH_ALGORITHM = "SHA1"

# Option keys that are signed and sent as oauth_<key>
ATTRIBUTE_KEYS = (
    "body_hash",
    "callback",
    "consumer_key",
    "nonce",
    "signature_method",
    "timestamp",
    "token",
    "verifier",
    "version",
)

# Option keys that are accepted but never signed as OAuth attributes
IGNORED_KEYS = (
    "consumer_secret",
    "token_secret",
    "signature",
    "realm",
    "ignore_extra_keys",
)

# Keys recognized when parsing an incoming header or form body
PARSE_KEYS = ATTRIBUTE_KEYS + ("signature",)


class Header:
    """
    An OAuth 1.0 (RFC 5849) Authorization header for a single request.

    Build one with explicit credentials to sign an outgoing request, or wrap
    an incoming request with ``from_header``/``from_form_body`` and call
    ``is_valid`` to check its signature.

    Args:
        method: HTTP method (case-insensitive)
        url: Request URL, query string included
        params: Request body parameters, as a mapping or (key, value) pairs
        options: OAuth options (consumer_key, consumer_secret, token,
            token_secret, signature_method, realm, ...). Merged over
            ``default_options(body)``.
        body: Raw request body. When given, ``oauth_body_hash`` is added to
            the defaults.
        registry: Signature method registry (default: the process-wide one)

    Example:
        >>> header = Header("GET", "https://api.example.com/1/statuses.json", {},
        ...                 {"consumer_key": "key", "consumer_secret": "secret"})
        >>> str(header)
        'OAuth oauth_consumer_key="key", oauth_nonce="...", ...'
    """

    def __init__(
        self,
        method: Any,
        url: Any,
        params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None = None,
        options: Mapping[str, Any] | None = None,
        body: str | bytes | None = None,
        *,
        registry: SignatureRegistry | None = None,
        use_defaults: bool = True,
    ):
        self.method = str(method).upper()
        self.url, self._url_params = normalize_url(url)
        self.params = params if params is not None else {}
        self.body = body
        self.registry = registry if registry is not None else default_registry

        self.options: dict[str, Any] = self.default_options(body) if use_defaults else {}
        self.options.update(options or {})

    # -- alternate constructors ---------------------------------------------

    @classmethod
    def from_header(
        cls,
        method: Any,
        url: Any,
        params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None,
        authorization: str,
        *,
        registry: SignatureRegistry | None = None,
    ) -> "Header":
        """Wrap a request whose OAuth options come from an Authorization header."""
        return cls(
            method, url, params, cls.parse(authorization),
            registry=registry, use_defaults=False,
        )

    @classmethod
    def from_form_body(
        cls,
        method: Any,
        url: Any,
        params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None,
        form_body: str | bytes,
        *,
        registry: SignatureRegistry | None = None,
    ) -> "Header":
        """Wrap a request whose OAuth options come from a form-encoded body."""
        return cls(
            method, url, params, cls.parse_form_body(form_body),
            registry=registry, use_defaults=False,
        )

    @classmethod
    def from_options(
        cls,
        method: Any,
        url: Any,
        params: Mapping[str, Any] | Iterable[tuple[Any, Any]] | None,
        source: OAuthOptions,
        body: str | bytes | None = None,
        *,
        registry: SignatureRegistry | None = None,
    ) -> "Header":
        """Build a header from any OAuthOptions variant."""
        if isinstance(source, ExplicitOptions):
            return cls(
                method, url, params, source.values, body,
                registry=registry, use_defaults=source.use_defaults,
            )
        if isinstance(source, HeaderOptions):
            return cls.from_header(method, url, params, source.authorization, registry=registry)
        if isinstance(source, FormBodyOptions):
            return cls.from_form_body(method, url, params, source.body, registry=registry)
        raise TypeError(f"Unsupported OAuth options source: {type(source).__name__}")

    # -- class helpers ------------------------------------------------------

    @staticmethod
    def default_options(body: str | bytes | None = None) -> dict[str, str]:
        """
        Fresh nonce and timestamp plus the default version and signature method.

        ``body_hash`` is included only when a body is given.
        """
        options = {
            "nonce": token_hex(16),
            "signature_method": DEFAULT_SIGNATURE_METHOD,
            "timestamp": str(int(time.time())),
            "version": OAUTH_VERSION,
        }
        if body is not None:
            options["body_hash"] = Header.body_hash(body)
        return options

    @staticmethod
    def body_hash(body: str | bytes | None, algorithm: str = DEFAULT_BODY_HASH_ALGORITHM) -> str:
        """
        Base64 digest of a request body for the ``oauth_body_hash`` extension.

        ``algorithm`` is a hashlib name, case- and dash-insensitive
        (``SHA1``, ``sha-256``). ``None`` hashes the empty body.
        """
        if body is None:
            data = b""
        elif isinstance(body, (bytes, bytearray)):
            data = bytes(body)
        else:
            data = str(body).encode("utf-8")
        digest = hashlib.new(algorithm.lower().replace("-", ""), data).digest()
        return base64.b64encode(digest).decode("ascii")

    @staticmethod
    def parse(header: Any) -> dict[str, str]:
        """
        Parse an Authorization header into bare attribute names.

        Raises:
            ParseError: If the header is malformed
        """
        return parser.parse_header(header, PARSE_KEYS, keep_realm=True)

    @staticmethod
    def parse_form_body(body: Any) -> dict[str, str]:
        """Parse OAuth attributes from a form-encoded body."""
        return parser.parse_form_body(body, PARSE_KEYS)

    escape = staticmethod(escape)
    unescape = staticmethod(unescape)

    # -- header rendering ---------------------------------------------------

    def __str__(self) -> str:
        return self.to_header()

    def __repr__(self) -> str:
        return f"<Header {self.method} {self.url}>"

    def to_header(self) -> str:
        """The ``OAuth ...`` Authorization header value."""
        return f"OAuth {self.normalized_attributes()}"

    def normalized_attributes(self) -> str:
        """Signed attributes sorted by name and rendered as ``key="value"``."""
        signed = self.signed_attributes()
        return ", ".join(f'{key}="{escape(signed[key])}"' for key in sorted(signed))

    def url_params(self) -> list[tuple[str, str]]:
        """Query parameters of the request URL."""
        return list(self._url_params)

    def attributes(self) -> dict[str, Any]:
        """
        OAuth attributes to sign, keyed ``oauth_<name>``.

        Raises:
            InvalidOptionsError: If an option key is not recognized and
                ``ignore_extra_keys`` is not set
        """
        return self._attributes(self.options)

    def header_attributes(self) -> dict[str, Any]:
        """``attributes()`` plus the unsigned ``realm``, when one is set."""
        return self._header_attributes(self.options)

    def signed_attributes(self) -> dict[str, Any]:
        """Header attributes including ``oauth_signature``."""
        attributes = self.header_attributes()
        attributes["oauth_signature"] = self.signature()
        return attributes

    # -- signing ------------------------------------------------------------

    def secret(self) -> str:
        """Escaped consumer secret and token secret joined with ``&``."""
        return self._secret(self.options)

    def signature_params(self) -> list[tuple[Any, Any]]:
        return self._signature_params(self.options)

    def normalized_params(self) -> str:
        return normalize_params(self.signature_params())

    def signature_base(self) -> str:
        """The RFC 5849 signature base string for this request."""
        return self._signature_base(self.options)

    def signature(self) -> str:
        """
        Compute ``oauth_signature`` with the configured signature method.

        RSA methods are keyed with the raw ``consumer_secret`` (a PEM private
        key); every other method with ``secret()``.

        Raises:
            UnknownSignatureMethodError: If the method is not registered
            InvalidOptionsError: If the options contain unknown keys
        """
        return self._signature(self.options)

    def is_valid(self, secrets: Mapping[str, Any] | None = None) -> bool:
        """
        Check the received ``signature`` option against a freshly computed one.

        ``secrets`` (typically consumer_secret and token_secret) are layered
        over the options for the computation only; the header is not modified.
        A mismatch returns False. Errors raised while computing the signature,
        such as an unreadable RSA key, propagate.

        Raises:
            KeyError: If the header carries no signature
        """
        options = ChainMap(dict(secrets or {}), self.options)
        received = options["signature"]
        computed = self._signature(options)
        valid = hmac.compare_digest(str(received).encode("utf-8"), computed.encode("utf-8"))
        logger.debug("Signature for %s %s is %s", self.method, self.url, "valid" if valid else "invalid")
        return valid

    # -- option-parameterized internals -------------------------------------

    def _attributes(self, options: Mapping[str, Any]) -> dict[str, Any]:
        extra = [k for k in options if k not in ATTRIBUTE_KEYS and k not in IGNORED_KEYS]
        if extra and not options.get("ignore_extra_keys"):
            raise InvalidOptionsError(extra)
        return {f"{OAUTH_PREFIX}{k}": options[k] for k in options if k in ATTRIBUTE_KEYS}

    def _header_attributes(self, options: Mapping[str, Any]) -> dict[str, Any]:
        attributes = self._attributes(options)
        if options.get("realm") is not None:
            attributes["realm"] = options["realm"]
        return attributes

    def _secret(self, options: Mapping[str, Any]) -> str:
        return "&".join(escape(options.get(k)) for k in ("consumer_secret", "token_secret"))

    def _signature_params(self, options: Mapping[str, Any]) -> list[tuple[Any, Any]]:
        return collect_params(self._attributes(options), self.params, self._url_params)

    def _signature_base(self, options: Mapping[str, Any]) -> str:
        base = signature_base(self.method, self.url, normalize_params(self._signature_params(options)))
        logger.debug("Signature base string: %s", base)
        return base

    def _signature(self, options: Mapping[str, Any]) -> str:
        # Key kind and sign function must come from the same entry
        entry = self.registry.get(options["signature_method"])
        if entry.rsa:
            key = options.get("consumer_secret")
        else:
            key = self._secret(options)
        return entry.sign(key, self._signature_base(options))
