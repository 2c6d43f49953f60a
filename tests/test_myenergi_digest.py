"""Tests for the myenergi digest authentication helpers."""

from __future__ import annotations

import hashlib

import pytest

from custom_components.myenergi.digest import (
    build_authorization,
    calculate_response,
    parse_challenge,
)
from custom_components.myenergi.exceptions import MyEnergiAuthError

MYENERGI_CHALLENGE = (
    'Digest realm="MyEnergi Telemetry",qop="auth",'
    'nonce="00206c600008ae8300085b947a4bc7e6",'
    'opaque="000000100000000100000000f72ea423",Stale="false",algorithm="MD5"'
)


def _md5(value: str) -> str:
    return hashlib.md5(value.encode()).hexdigest()


class TestCalculateResponse:
    """Test the request digest computation."""

    def test_rfc2617_example(self) -> None:
        """The worked example of RFC 2617 section 3.5."""
        response = calculate_response(
            "GET",
            "Mufasa",
            "Circle Of Life",
            "testrealm@host.com",
            "auth",
            "/dir/index.html",
            "dcd98b7102dd2f0e8b11d0f600bfb0c093",
            "00000001",
            "0a4f113b",
        )

        assert response == "6629fae49393a05397450978507c4ef1"

    def test_without_qop_uses_rfc2069(self) -> None:
        """No qop means MD5(HA1:nonce:HA2)."""
        ha1 = _md5("user:realm:pw")
        ha2 = _md5("GET:/cgi-jstatus-*")

        response = calculate_response(
            "GET", "user", "pw", "realm", None, "/cgi-jstatus-*", "abc", "00000001", "xyz"
        )

        assert response == _md5(f"{ha1}:abc:{ha2}")


class TestParseChallenge:
    """Test WWW-Authenticate parsing."""

    def test_myenergi_challenge(self) -> None:
        challenge = parse_challenge(MYENERGI_CHALLENGE)

        assert challenge["realm"] == "MyEnergi Telemetry"
        assert challenge["qop"] == "auth"
        assert challenge["nonce"] == "00206c600008ae8300085b947a4bc7e6"
        assert challenge["opaque"] == "000000100000000100000000f72ea423"
        assert challenge["stale"] == "false"
        assert challenge["algorithm"] == "MD5"

    def test_comma_inside_quotes(self) -> None:
        challenge = parse_challenge('Digest realm="a, b", nonce=n1, qop="auth,auth-int"')

        assert challenge["realm"] == "a, b"
        assert challenge["nonce"] == "n1"
        assert challenge["qop"] == "auth,auth-int"

    def test_basic_scheme_rejected(self) -> None:
        with pytest.raises(MyEnergiAuthError):
            parse_challenge('Basic realm="x"')

    def test_missing_nonce_rejected(self) -> None:
        with pytest.raises(MyEnergiAuthError):
            parse_challenge('Digest realm="x"')


class TestBuildAuthorization:
    """Test the Authorization header."""

    def test_header_fields(self) -> None:
        challenge = parse_challenge(MYENERGI_CHALLENGE)

        header = build_authorization(
            challenge, "GET", "/cgi-jstatus-*", "10088888", "key", client_nonce="cn"
        )

        expected = calculate_response(
            "GET",
            "10088888",
            "key",
            "MyEnergi Telemetry",
            "auth",
            "/cgi-jstatus-*",
            challenge["nonce"],
            "00000001",
            "cn",
        )
        assert header.startswith("Digest ")
        assert 'username="10088888"' in header
        assert 'uri="/cgi-jstatus-*"' in header
        assert "nc=00000001" in header
        assert "qop=auth" in header
        assert f'response="{expected}"' in header
        assert f'opaque="{challenge["opaque"]}"' in header

    def test_nonce_count_is_hex(self) -> None:
        challenge = parse_challenge(MYENERGI_CHALLENGE)

        header = build_authorization(challenge, "GET", "/", "u", "p", nonce_count=26)

        assert "nc=0000001a" in header

    def test_random_client_nonce(self) -> None:
        challenge = parse_challenge(MYENERGI_CHALLENGE)

        first = build_authorization(challenge, "GET", "/", "u", "p")
        second = build_authorization(challenge, "GET", "/", "u", "p")

        assert first != second

    def test_unsupported_algorithm(self) -> None:
        challenge = {"realm": "r", "nonce": "n", "algorithm": "SHA-256"}

        with pytest.raises(MyEnergiAuthError):
            build_authorization(challenge, "GET", "/", "u", "p")

    def test_unsupported_qop(self) -> None:
        challenge = {"realm": "r", "nonce": "n", "qop": "auth-int"}

        with pytest.raises(MyEnergiAuthError):
            build_authorization(challenge, "GET", "/", "u", "p")
