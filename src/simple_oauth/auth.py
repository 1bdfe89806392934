"""
httpx authentication that signs requests with an OAuth 1.0 Authorization header.
"""

from __future__ import annotations

from typing import Any, Generator

import httpx

from .header import DEFAULT_SIGNATURE_METHOD, Header
from .signature import SignatureRegistry

CONTENT_TYPE_FORM_URLENCODED = "application/x-www-form-urlencoded"


class OAuth1Auth(httpx.Auth):
    """
    Sign httpx requests with OAuth 1.0.

    Form-encoded bodies are included in the signature as request parameters.
    Any other non-empty body is bound through ``oauth_body_hash`` unless
    ``body_hash`` is False.

    Args:
        consumer_key: Client identifier
        consumer_secret: Client shared secret, or a PEM private key for RSA-SHA1
        token: Token identifier
        token_secret: Token shared secret
        signature_method: Signature method name. Default: HMAC-SHA1
        callback: oauth_callback for temporary credential requests
        verifier: oauth_verifier for token requests
        realm: Unsigned realm shown in the header
        body_hash: Add oauth_body_hash for non-form bodies. Default: True
        registry: Signature method registry (default: the process-wide one)

    Example:
        >>> auth = OAuth1Auth("key", "secret", token="token", token_secret="token-secret")
        >>> with httpx.Client(auth=auth) as client:
        ...     client.get("https://api.example.com/1/statuses/home_timeline.json")
    """

    requires_request_body = True

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str | None = None,
        token: str | None = None,
        token_secret: str | None = None,
        signature_method: str = DEFAULT_SIGNATURE_METHOD,
        callback: str | None = None,
        verifier: str | None = None,
        realm: str | None = None,
        body_hash: bool = True,
        registry: SignatureRegistry | None = None,
    ):
        self.credentials: dict[str, Any] = {
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "token": token,
            "token_secret": token_secret,
            "signature_method": signature_method,
            "callback": callback,
            "verifier": verifier,
            "realm": realm,
        }
        self.body_hash = body_hash
        self.registry = registry

    def build_header(self, request: httpx.Request) -> Header:
        """Create the signed Header for a prepared request."""
        options = {k: v for k, v in self.credentials.items() if v is not None}
        content_type = request.headers.get("Content-Type", "")
        content = request.content

        params: list[tuple[str, str]] = []
        body: bytes | None = None
        if CONTENT_TYPE_FORM_URLENCODED in content_type:
            params = httpx.QueryParams(content.decode("utf-8", errors="replace")).multi_items()
        elif content and self.body_hash:
            body = content

        return Header(request.method, request.url, params, options, body, registry=self.registry)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = str(self.build_header(request))
        yield request
