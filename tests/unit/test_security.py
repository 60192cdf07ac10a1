"""Unit tests for JWT verification and share token generation."""

from datetime import timedelta

import pytest

from docvault.infrastructure.security.jwt import create_access_token, verify_token
from docvault.shared.utils import generate_share_token


class TestVerifyToken:
    def test_round_trip_subject(self) -> None:
        assert verify_token(create_access_token({"sub": "alice"}))["sub"] == "alice"

    def test_expired(self) -> None:
        token = create_access_token({"sub": "alice"}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(ValueError, match="Invalid token"):
            verify_token(token)

    def test_missing_subject(self) -> None:
        with pytest.raises(ValueError):
            verify_token(create_access_token({"name": "alice"}))

    def test_garbage(self) -> None:
        with pytest.raises(ValueError, match="Invalid token"):
            verify_token("not-a-jwt")


class TestShareToken:
    def test_default_is_256_bits_hex(self) -> None:
        token = generate_share_token()
        assert len(token) == 64
        int(token, 16)

    def test_unique(self) -> None:
        assert len({generate_share_token() for _ in range(100)}) == 100

    def test_minimum_entropy(self) -> None:
        with pytest.raises(ValueError):
            generate_share_token(4)
