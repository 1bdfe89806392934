"""
Sign requests with OAuth1Auth and verify them on the receiving side.

Usage:
    # Install the package
    pip install -e .

    # Run the demo
    python examples/sign_and_verify.py

The "server" is an httpx.MockTransport handler, so nothing leaves the process.

Environment variables:
    OAUTH_CONSUMER_SECRET - Consumer secret shared with the server (default: kd94hf93k423kf44)
    OAUTH_SIGNATURE_METHOD - Signature method used by the client (default: HMAC-SHA1)
"""

import logging
import os

import httpx

from simple_oauth import Header, OAuth1Auth, ParseError

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

CONSUMER_KEY = "dpf43f3p2l4k3l03"
CONSUMER_SECRET = os.getenv("OAUTH_CONSUMER_SECRET", "kd94hf93k423kf44")
SIGNATURE_METHOD = os.getenv("OAUTH_SIGNATURE_METHOD", "HMAC-SHA1")

# Credentials known to the server, keyed by consumer key and token
CONSUMERS = {CONSUMER_KEY: "kd94hf93k423kf44"}
TOKENS = {"nnch734d00sl2jdk": "pfkkdhi9sl3r4s00"}


def handle(request: httpx.Request) -> httpx.Response:
    """Verify the OAuth signature of an incoming request."""
    authorization = request.headers.get("Authorization")
    if not authorization:
        return httpx.Response(401, json={"error": "missing Authorization header"})

    params = []
    if "application/x-www-form-urlencoded" in request.headers.get("Content-Type", ""):
        params = httpx.QueryParams(request.content.decode("utf-8")).multi_items()

    try:
        header = Header.from_header(request.method, request.url, params, authorization)
    except ParseError as e:
        return httpx.Response(400, json={"error": str(e)})

    secrets = {
        "consumer_secret": CONSUMERS.get(header.options.get("consumer_key")),
        "token_secret": TOKENS.get(header.options.get("token")),
    }
    if "body_hash" in header.options and header.options["body_hash"] != Header.body_hash(request.content):
        return httpx.Response(401, json={"verified": False, "error": "body hash mismatch"})

    verified = header.is_valid(secrets)
    return httpx.Response(200 if verified else 401, json={"verified": verified})


def main():
    auth = OAuth1Auth(
        CONSUMER_KEY,
        CONSUMER_SECRET,
        token="nnch734d00sl2jdk",
        token_secret="pfkkdhi9sl3r4s00",
        signature_method=SIGNATURE_METHOD,
    )
    transport = httpx.MockTransport(handle)

    with httpx.Client(auth=auth, transport=transport) as client:
        for response in (
            client.get("https://photos.example.net/photos", params={"file": "vacation.jpg"}),
            client.post("https://photos.example.net/photos", data={"title": "Beach"}),
            client.post("https://photos.example.net/upload", json={"text": "Hello"}),
        ):
            print(response.request.method, response.request.url, response.status_code, response.json())


if __name__ == "__main__":
    main()
