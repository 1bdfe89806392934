"""Tests for Authorization header and form body parsing."""

import re

import pytest

from simple_oauth import Header
from simple_oauth.errors import MalformedHeaderError, ParseError
from simple_oauth.parser import HeaderParser, parse_form_body, parse_header

FULL_HEADER = (
    'OAuth oauth_consumer_key="dpf43f3p2l4k3l03", oauth_nonce="wIjqoS", '
    'oauth_signature="74KNZJeDHnMBp0EMJ9ZHt%2FXKycU%3D", oauth_signature_method="HMAC-SHA1", '
    'oauth_timestamp="137131200", oauth_token="hh5s93j4hdidpola", oauth_version="1.0"'
)


class TestParseHeader:
    """Tests for Header.parse."""

    def test_returns_dict(self):
        """Parsing returns a plain dict."""
        assert isinstance(Header.parse(FULL_HEADER), dict)

    def test_strips_oauth_prefix(self):
        """Keys are returned without the oauth_ prefix."""
        parsed = Header.parse('OAuth oauth_consumer_key="dpf43f3p2l4k3l03"')
        assert parsed == {"consumer_key": "dpf43f3p2l4k3l03"}

    def test_decodes_values(self):
        """Values are percent-decoded."""
        assert Header.parse(FULL_HEADER)["signature"] == "74KNZJeDHnMBp0EMJ9ZHt/XKycU="

    def test_empty_value(self):
        """Empty quoted values are kept."""
        assert Header.parse('OAuth oauth_callback=""')["callback"] == ""

    def test_all_attributes(self):
        """Every attribute of a full header is parsed."""
        assert len(Header.parse(FULL_HEADER)) == 7

    def test_no_spaces_after_commas(self):
        """Commas without following whitespace separate pairs."""
        assert len(Header.parse(FULL_HEADER.replace(", ", ","))) == 7

    def test_multiple_spaces_after_commas(self):
        """Extra whitespace after commas is allowed."""
        assert len(Header.parse(FULL_HEADER.replace(", ", ",   "))) == 7

    def test_trailing_whitespace(self):
        """A trailing comma and whitespace are accepted."""
        parsed = Header.parse('OAuth oauth_consumer_key="dpf43f3p2l4k3l03",   ')
        assert parsed["consumer_key"] == "dpf43f3p2l4k3l03"

    def test_multiple_spaces_after_scheme(self):
        """Any amount of whitespace may follow the scheme."""
        parsed = Header.parse('OAuth   oauth_consumer_key="dpf43f3p2l4k3l03"')
        assert parsed["consumer_key"] == "dpf43f3p2l4k3l03"

    def test_scheme_only(self):
        """A header with no pairs parses to an empty dict."""
        assert Header.parse("OAuth ") == {}

    def test_comma_inside_value(self):
        """Commas inside a quoted value do not split the pair."""
        parsed = Header.parse('OAuth oauth_consumer_key="key,with,commas", oauth_signature="sig"')
        assert parsed == {"consumer_key": "key,with,commas", "signature": "sig"}

    def test_ignores_unknown_oauth_keys(self):
        """oauth_ keys that are not attributes are dropped."""
        parsed = Header.parse(
            'OAuth oauth_consumer_key="dpf43f3p2l4k3l03", oauth_invalid_key="bad", oauth_signature="sig"'
        )
        assert parsed == {"consumer_key": "dpf43f3p2l4k3l03", "signature": "sig"}

    def test_ignores_unprefixed_keys(self):
        """Keys without the oauth_ prefix are dropped."""
        parsed = Header.parse('OAuth consumer_key="dpf43f3p2l4k3l03"')
        assert parsed == {}

    def test_keeps_realm(self):
        """The unprefixed realm is kept."""
        parsed = Header.parse('OAuth realm="Photos", oauth_consumer_key="key"')
        assert parsed == {"realm": "Photos", "consumer_key": "key"}

    def test_accepts_str_convertible(self):
        """Anything with a str() can be parsed, including a Header."""
        header = Header("GET", "https://photos.example.net/photos")
        assert "signature" in Header.parse(header)

    def test_round_trip(self):
        """Parsing a rendered header gives back its options plus the signature."""
        header = Header("GET", "https://photos.example.net/photos", {}, {"consumer_key": "key", "token": "tok"})
        parsed = Header.parse(str(header))

        signature = parsed.pop("signature")

        assert parsed == header.options
        assert signature


class TestParseHeaderErrors:
    """Tests for malformed headers."""

    def test_missing_scheme(self):
        """Headers without the OAuth scheme are rejected."""
        with pytest.raises(ParseError, match="Authorization header must start with 'OAuth '"):
            Header.parse('oauth_consumer_key="dpf43f3p2l4k3l03"')

    def test_other_scheme(self):
        """Other authorization schemes are rejected."""
        with pytest.raises(ParseError, match="must start with 'OAuth '"):
            Header.parse("Bearer xyz")

    def test_scheme_without_whitespace(self):
        """The scheme must be followed by whitespace."""
        with pytest.raises(ParseError):
            Header.parse('OAuthoauth_consumer_key="k"')

    def test_missing_comma(self):
        """Pairs not separated by a comma report the offset after the first pair."""
        header = 'OAuth oauth_consumer_key="dpf43f3p2l4k3l03" oauth_signature="sig"'

        with pytest.raises(ParseError) as exc_info:
            Header.parse(header)

        error = exc_info.value
        assert "Expected comma after 'oauth_consumer_key' parameter at position 44" in str(error)
        assert error.position == 44
        assert error.remaining == 'oauth_signature="sig"'
        assert repr('oauth_signature="sig"') in str(error)

    def test_malformed_pair(self):
        """An unquoted pair stops parsing with its offset and the remaining text."""
        header = 'OAuth oauth_consumer_key="dpf43f3p2l4k3l03", malformed_without_quotes, oauth_token="token"'

        with pytest.raises(ParseError, match="Could not parse parameter at position 45") as exc_info:
            Header.parse(header)

        assert exc_info.value.remaining == 'malformed_without_quotes, oauth_token="token"'

    def test_missing_opening_quote(self):
        """An unquoted value fails at the start of the pair."""
        with pytest.raises(ParseError, match=re.escape("position 6: 'oauth_consumer_key=dpf43f3p2l4k3l03'")):
            Header.parse("OAuth oauth_consumer_key=dpf43f3p2l4k3l03")

    def test_error_alias(self):
        """MalformedHeaderError is the same class as ParseError."""
        assert MalformedHeaderError is ParseError

    def test_error_is_value_error(self):
        """Parse errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            Header.parse("Basic abc")


class TestHeaderParser:
    """Tests for HeaderParser with caller-supplied keys."""

    def test_only_valid_keys_kept(self):
        """Only keys in valid_keys survive."""
        parsed = HeaderParser('OAuth oauth_token="abc", oauth_nonce="n"').parse(["token"])
        assert parsed == {"token": "abc"}

    def test_realm_dropped_by_default(self):
        """realm is only kept when asked for."""
        assert parse_header('OAuth realm="x", oauth_token="t"', ["token"]) == {"token": "t"}

    def test_last_duplicate_wins(self):
        """A repeated key keeps its last value."""
        assert parse_header('OAuth oauth_token="a", oauth_token="b"', ["token"]) == {"token": "b"}

    def test_none_header(self):
        """None is treated as an empty header and rejected."""
        with pytest.raises(ParseError):
            parse_header(None, ["token"])


class TestParseFormBody:
    """Tests for Header.parse_form_body."""

    def test_extracts_oauth_parameters(self):
        """oauth_ parameters are returned without their prefix."""
        parsed = Header.parse_form_body("oauth_consumer_key=key123&oauth_token=token456&oauth_signature=sig789")
        assert parsed == {"consumer_key": "key123", "token": "token456", "signature": "sig789"}

    def test_decodes_percent_encoding(self):
        """Percent-encoded values are decoded."""
        parsed = Header.parse_form_body("oauth_consumer_key=key%2B123&oauth_signature=sig%3D%26value")
        assert parsed["consumer_key"] == "key+123"
        assert parsed["signature"] == "sig=&value"

    def test_plus_is_space(self):
        """Plus signs decode to spaces."""
        assert Header.parse_form_body("oauth_consumer_key=key+with+spaces")["consumer_key"] == "key with spaces"

    def test_empty_value(self):
        """Empty values are kept."""
        assert Header.parse_form_body("oauth_callback=&oauth_token=t")["callback"] == ""

    def test_key_without_equals(self):
        """A pair without = yields an empty value."""
        parsed = Header.parse_form_body("oauth_callback&oauth_consumer_key=key123")
        assert parsed == {"callback": "", "consumer_key": "key123"}

    def test_first_duplicate_wins(self):
        """For repeated keys the first value is used."""
        parsed = Header.parse_form_body("oauth_consumer_key=first&oauth_consumer_key=second")
        assert parsed["consumer_key"] == "first"

    def test_ignores_non_oauth_parameters(self):
        """Request parameters are not returned."""
        parsed = Header.parse_form_body("oauth_consumer_key=key123&status=hello&oauth_token=token456")
        assert parsed == {"consumer_key": "key123", "token": "token456"}

    def test_ignores_unknown_oauth_keys(self):
        """oauth_ keys that are not attributes are dropped."""
        parsed = Header.parse_form_body("oauth_consumer_key=key123&oauth_bogus=x&oauth_signature=sig")
        assert parsed == {"consumer_key": "key123", "signature": "sig"}

    def test_requires_exact_prefix(self):
        """Keys merely containing oauth_ are not credentials."""
        parsed = Header.parse_form_body("xoauth_consumer_key=fake&oauth_consumer_key=real")
        assert parsed == {"consumer_key": "real"}

    def test_empty_body(self):
        """An empty body has no credentials."""
        assert Header.parse_form_body("") == {}

    def test_bytes_body(self):
        """Bytes bodies are decoded as UTF-8."""
        assert Header.parse_form_body(b"oauth_token=t%C3%A9") == {"token": "té"}

    def test_none_body(self):
        """None has no credentials."""
        assert parse_form_body(None, ["token"]) == {}

    def test_all_attributes(self):
        """Every attribute name is recognized."""
        body = (
            "oauth_consumer_key=ck&oauth_token=tk&oauth_signature_method=HMAC-SHA1"
            "&oauth_signature=sig&oauth_timestamp=123456&oauth_nonce=abc&oauth_version=1.0"
            "&oauth_callback=http%3A%2F%2Fexample.com&oauth_verifier=ver&oauth_body_hash=bh"
        )
        assert Header.parse_form_body(body) == {
            "consumer_key": "ck",
            "token": "tk",
            "signature_method": "HMAC-SHA1",
            "signature": "sig",
            "timestamp": "123456",
            "nonce": "abc",
            "version": "1.0",
            "callback": "http://example.com",
            "verifier": "ver",
            "body_hash": "bh",
        }
