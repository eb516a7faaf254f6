"""Tests for the signed session cookie codec."""

import jwt
import pytest
from fastapi import Response

from modules.sessions import SessionCodec
from shared.models import Role

SECRET = "codec-test-secret"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec(clock: FakeClock) -> SessionCodec:
    return SessionCodec(SECRET, max_age=3600, secure=True, clock=clock)


class TestCreateAndParse:
    """Tests for SessionCodec.create / parse."""

    def test_round_trip(self, codec):
        """A created cookie parses back to the same identity."""
        session = codec.parse(codec.create("user-1", "pilot@example.com", Role.ADMIN))
        assert session.user_id == "user-1"
        assert session.email == "pilot@example.com"
        assert session.role is Role.ADMIN
        assert len(session.csrf_token) == 64

    def test_each_session_gets_new_csrf_token(self, codec):
        first = codec.parse(codec.create("user-1", "a@b.co"))
        second = codec.parse(codec.create("user-1", "a@b.co"))
        assert first.csrf_token != second.csrf_token

    def test_unknown_role_becomes_user(self, codec):
        assert codec.parse(codec.create("user-1", "", "superuser")).role is Role.USER

    def test_missing_role_claim_defaults_to_user(self, codec, clock):
        """Cookies without a role claim still parse, as plain users."""
        value = jwt.encode(
            {"sub": "user-1", "csrf": "a" * 64, "iat": int(clock.now), "exp": int(clock.now) + 60},
            SECRET,
            algorithm="HS256",
        )
        assert codec.parse(value).role is Role.USER

    def test_expired_cookie_rejected(self, codec, clock):
        value = codec.create("user-1", "a@b.co")
        clock.now += 3601
        assert codec.parse(value) is None

    def test_expiry_follows_codec_clock(self, codec, clock):
        """Validity is judged by the codec's clock, not the wall clock."""
        value = codec.create("user-1", "a@b.co")
        clock.now += 3599
        assert codec.parse(value).user_id == "user-1"
        clock.now += 1
        assert codec.parse(value) is None

    def test_wrong_secret_rejected(self, codec, clock):
        other = SessionCodec("another-secret", clock=clock)
        assert codec.parse(other.create("user-1", "a@b.co")) is None

    def test_tampered_payload_rejected(self, codec):
        """Changing any payload byte breaks the signature."""
        header, payload, signature = codec.create("user-1", "a@b.co").split(".")
        forged = payload[:-2] + ("A" if payload[-2] != "A" else "B") + payload[-1]
        assert codec.parse(f"{header}.{forged}.{signature}") is None

    def test_non_canonical_signature_rejected(self, codec):
        """Alternate base64url spellings of the signature are rejected."""
        value = codec.create("user-1", "a@b.co")
        header, payload, signature = value.split(".")
        # 32-byte HMAC encodes to 43 chars; the last one carries 2 unused bits
        alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        index = alphabet.index(signature[-1])
        sibling = alphabet[index ^ 1]
        assert codec.parse(f"{header}.{payload}.{signature[:-1]}{sibling}") is None

    @pytest.mark.parametrize("value", [None, "", "garbage", "a.b.c", "a.b"])
    def test_malformed_values(self, codec, value):
        assert codec.parse(value) is None

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            SessionCodec("")


class TestCookies:
    """Tests for cookie attributes."""

    def test_set_cookie_attributes(self, codec):
        """The session cookie is HTTP-only, SameSite=strict and Secure."""
        response = Response()
        value = codec.set_cookie(response, "user-1", "a@b.co", Role.USER)
        header = response.headers["set-cookie"]
        assert header.startswith(f"etu_session={value}")
        assert "HttpOnly" in header
        assert "SameSite=strict" in header
        assert "Secure" in header
        assert "Max-Age=3600" in header
        assert "Path=/" in header

    def test_delete_cookie_expires_it(self, codec):
        response = Response()
        codec.delete_cookie(response)
        header = response.headers["set-cookie"]
        assert header.startswith("etu_session=")
        assert "Max-Age=0" in header
