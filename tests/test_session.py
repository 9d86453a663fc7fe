"""Tests for turning the Firebase ID token into a session."""

from __future__ import annotations

import jwt
import pytest

from notification_doctor.security.session import (
    Session,
    SessionError,
    current_session,
    decode_id_token,
)

SECRET = "test-secret-with-at-least-32-bytes!"


def _token(claims: dict) -> str:
    return jwt.encode(claims, SECRET, algorithm="HS256")


class TestCurrentSession:
    def test_no_token_means_no_session(self) -> None:
        assert current_session(None, verify=False) is None
        assert current_session("", verify=False) is None

    def test_uid_from_user_id_claim(self) -> None:
        token = _token({"user_id": "abc", "sub": "abc", "email": "a@example.com"})
        s = current_session(token, verify=False)
        assert s == Session(uid="abc", email="a@example.com")

    def test_falls_back_to_sub(self) -> None:
        s = current_session(_token({"sub": "xyz"}), verify=False)
        assert s.uid == "xyz"
        assert s.email is None

    def test_token_without_subject(self) -> None:
        with pytest.raises(SessionError, match="subject"):
            current_session(_token({"email": "a@example.com"}), verify=False)

    def test_garbage_token(self) -> None:
        with pytest.raises(SessionError):
            current_session("not-a-jwt", verify=False)


class TestDecodeIdToken:
    def test_unverified_returns_claims(self) -> None:
        claims = decode_id_token(_token({"sub": "u1", "aud": "proj"}), verify=False)
        assert claims["sub"] == "u1"

    def test_verification_needs_project(self) -> None:
        with pytest.raises(SessionError, match="FIREBASE_PROJECT_ID"):
            decode_id_token(_token({"sub": "u1"}), project_id=None, verify=True)
