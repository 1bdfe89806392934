"""
Signature method registry.

Maps a signature method name (``HMAC-SHA1``, ``PLAINTEXT``, ...) to the
function that signs a base string. Names are looked up case-insensitively with
``-`` and ``_`` treated as the same character, so ``HMAC-SHA1`` and
``hmac_sha1`` refer to the same entry.

The module-level ``registry`` is shared by the whole process. Use a private
``SignatureRegistry`` and pass it to ``Header(registry=...)`` when a test or an
application needs its own set of methods.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .errors import UnknownSignatureMethodError

logger = logging.getLogger(__name__)

SignFunction = Callable[[Any, str], str]


def normalize_name(name: Any) -> str:
    """
    Normalize a signature method name for lookup.

    Examples:
        >>> normalize_name("HMAC-SHA1")
        'hmac_sha1'
    """
    return str(name).lower().replace("-", "_")


def _encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return ("" if value is None else str(value)).encode("utf-8")


def hmac_sha1(secret: Any, signature_base: str) -> str:
    """HMAC-SHA1 of the base string, Base64 encoded."""
    digest = hmac.new(_to_bytes(secret), _to_bytes(signature_base), hashlib.sha1).digest()
    return _encode_base64(digest)


def hmac_sha256(secret: Any, signature_base: str) -> str:
    """HMAC-SHA256 of the base string, Base64 encoded."""
    digest = hmac.new(_to_bytes(secret), _to_bytes(signature_base), hashlib.sha256).digest()
    return _encode_base64(digest)


def load_rsa_private_key(private_key_pem: Any) -> RSAPrivateKey:
    """
    Load a PEM-encoded RSA private key.

    Raises:
        TypeError: If no key material was given or the key is not RSA
        ValueError: If the PEM data cannot be parsed
    """
    if not isinstance(private_key_pem, (str, bytes)):
        raise TypeError(
            f"RSA signing requires a PEM-encoded private key, got {type(private_key_pem).__name__}"
        )
    key = serialization.load_pem_private_key(_to_bytes(private_key_pem), password=None)
    if not isinstance(key, RSAPrivateKey):
        raise TypeError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def rsa_sha1(private_key_pem: Any, signature_base: str) -> str:
    """RSASSA-PKCS1-v1_5 with SHA-1 over the base string, Base64 encoded."""
    key = load_rsa_private_key(private_key_pem)
    signature = key.sign(_to_bytes(signature_base), padding.PKCS1v15(), hashes.SHA1())
    return _encode_base64(signature)


def plaintext(secret: Any, signature_base: str | None = None) -> str:
    """Return the already escaped ``consumer_secret&token_secret`` pair unchanged."""
    return "" if secret is None else str(secret)


@dataclass(frozen=True)
class SignatureMethod:
    """
    A registered signature method.

    Attributes:
        name: Normalized method name
        sign: Function taking (secret, signature_base) and returning the signature
        rsa: Whether the method is keyed by a raw RSA private key instead of
            the escaped ``consumer_secret&token_secret`` pair
    """
    name: str
    sign: SignFunction
    rsa: bool = False


BUILTIN_METHODS = (
    SignatureMethod("hmac_sha1", hmac_sha1),
    SignatureMethod("hmac_sha256", hmac_sha256),
    SignatureMethod("rsa_sha1", rsa_sha1, rsa=True),
    SignatureMethod("plaintext", plaintext),
)


class SignatureRegistry:
    """
    Thread-safe table of signature methods.

    All lookups and mutations hold the same lock.

    Example:
        >>> reg = SignatureRegistry()
        >>> @reg.register("HMAC-SHA512")
        ... def hmac_sha512(secret, base):
        ...     return "..."
        >>> reg.is_registered("hmac-sha512")
        True
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._methods: dict[str, SignatureMethod] = {}
        self.reset()

    def register(
        self,
        name: Any,
        fn: SignFunction | None = None,
        *,
        rsa: bool = False,
    ) -> Any:
        """
        Register ``fn`` under ``name``, replacing any existing entry.

        When ``fn`` is omitted, returns a decorator that registers the
        decorated function.
        """
        if fn is None:
            def decorator(func: SignFunction) -> SignFunction:
                self.register(name, func, rsa=rsa)
                return func
            return decorator

        key = normalize_name(name)
        with self._lock:
            self._methods[key] = SignatureMethod(key, fn, bool(rsa))
        logger.debug("Registered signature method %s (rsa=%s)", key, bool(rsa))
        return fn

    def unregister(self, name: Any) -> None:
        """Remove a method. Unknown names are ignored."""
        key = normalize_name(name)
        with self._lock:
            self._methods.pop(key, None)
        logger.debug("Unregistered signature method %s", key)

    def reset(self) -> None:
        """Restore exactly the built-in methods, dropping custom registrations."""
        with self._lock:
            self._methods = {m.name: m for m in BUILTIN_METHODS}

    def is_registered(self, name: Any) -> bool:
        with self._lock:
            return normalize_name(name) in self._methods

    def is_rsa(self, name: Any) -> bool:
        """Whether ``name`` is an RSA-keyed method. False for unknown names."""
        with self._lock:
            entry = self._methods.get(normalize_name(name))
        return entry is not None and entry.rsa

    def methods(self) -> list[str]:
        """Normalized names of every registered method."""
        with self._lock:
            return list(self._methods)

    def get(self, name: Any) -> SignatureMethod:
        """
        Look up a method.

        Raises:
            UnknownSignatureMethodError: If ``name`` is not registered
        """
        with self._lock:
            entry = self._methods.get(normalize_name(name))
            registered = list(self._methods)
        if entry is None:
            logger.warning("Unknown signature method requested: %s", name)
            raise UnknownSignatureMethodError(str(name), registered)
        return entry

    def sign(self, name: Any, secret: Any, signature_base: str) -> str:
        """Sign ``signature_base`` with the method registered under ``name``."""
        return self.get(name).sign(secret, signature_base)

    def __contains__(self, name: Any) -> bool:
        return self.is_registered(name)


# Process-wide default registry
registry = SignatureRegistry()


def register(name: Any, fn: SignFunction | None = None, *, rsa: bool = False) -> Any:
    """Register a method on the default registry. See SignatureRegistry.register."""
    return registry.register(name, fn, rsa=rsa)


def unregister(name: Any) -> None:
    registry.unregister(name)


def reset() -> None:
    registry.reset()


def is_registered(name: Any) -> bool:
    return registry.is_registered(name)


def is_rsa(name: Any) -> bool:
    return registry.is_rsa(name)


def methods() -> list[str]:
    return registry.methods()


def sign(name: Any, secret: Any, signature_base: str) -> str:
    return registry.sign(name, secret, signature_base)
