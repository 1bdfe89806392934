"""
simple_oauth

Build, parse and validate OAuth 1.0 (RFC 5849) Authorization headers.
"""

from .auth import OAuth1Auth
from .encoding import escape, unescape
from .errors import (
    InvalidOptionsError,
    MalformedHeaderError,
    ParseError,
    SimpleOAuthError,
    UnknownSignatureMethodError,
)
from .header import Header
from .models import ExplicitOptions, FormBodyOptions, HeaderOptions, OAuthOptions
from .signature import SignatureRegistry, registry

__version__ = "0.1.0"

__all__ = [
    "Header",
    "OAuth1Auth",
    "SignatureRegistry",
    "registry",
    "escape",
    "unescape",
    "ExplicitOptions",
    "HeaderOptions",
    "FormBodyOptions",
    "OAuthOptions",
    "SimpleOAuthError",
    "ParseError",
    "MalformedHeaderError",
    "InvalidOptionsError",
    "UnknownSignatureMethodError",
]
