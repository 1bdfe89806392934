"""Shared fixtures."""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from simple_oauth import signature


# RFC 5849 section 1.2 credentials
CONSUMER_KEY = "dpf43f3p2l4k3l03"
CONSUMER_SECRET = "kd94hf93k423kf44"
TOKEN = "nnch734d00sl2jdk"
TOKEN_SECRET = "pfkkdhi9sl3r4s00"


@pytest.fixture(autouse=True)
def reset_registry():
    """Restore the built-in signature methods after every test."""
    yield
    signature.reset()


@pytest.fixture(scope="session")
def rsa_key():
    """A throwaway RSA private key object."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_private_key(rsa_key):
    """The RSA private key as PEM text."""
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def credentials():
    """Full set of RFC 5849 example credentials with a fixed nonce and timestamp."""
    return {
        "consumer_key": CONSUMER_KEY,
        "consumer_secret": CONSUMER_SECRET,
        "token": TOKEN,
        "token_secret": TOKEN_SECRET,
        "signature_method": "HMAC-SHA1",
        "timestamp": "137131202",
        "nonce": "chapoH",
    }
