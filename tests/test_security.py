"""
Password hashing and token issue/verify, without HTTP.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.errors import InvalidToken
from app.security import (
    Claims,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

CLAIMS = Claims(id=7, name="Alice", email="a@x.com", role="customer")


class TestPasswordHashing:
    def test_hash_is_salted_and_verifies(self):
        first = hash_password("secret1")
        second = hash_password("secret1")

        assert first != "secret1"
        assert first != second
        assert verify_password("secret1", first) is True
        assert verify_password("secret2", first) is False

    def test_missing_hash_never_verifies(self):
        assert verify_password("secret1", None) is False

    def test_garbage_hash_never_verifies(self):
        assert verify_password("secret1", "plaintext-not-a-hash") is False


class TestTokens:
    def test_round_trip_carries_claims(self):
        token = create_access_token(CLAIMS)
        assert decode_access_token(token) == CLAIMS

    def test_expiry_is_24_hours(self):
        token = create_access_token(CLAIMS)
        payload = jwt.get_unverified_claims(token)
        assert payload["exp"] - payload["iat"] == 24 * 3600
        assert payload["sub"] == "7"

    def test_accepted_just_before_expiry(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
        token = create_access_token(CLAIMS, issued_at=issued)
        assert decode_access_token(token).id == 7

    def test_rejected_just_after_expiry(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
        token = create_access_token(CLAIMS, issued_at=issued)
        with pytest.raises(InvalidToken):
            decode_access_token(token)

    def test_rejects_foreign_signature(self):
        token = jwt.encode(
            {"id": 7, "name": "Alice", "email": "a@x.com", "role": "provider"},
            "someone-elses-secret",
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            decode_access_token(token)

    def test_rejects_tampered_payload(self):
        token = create_access_token(CLAIMS)
        header, _, signature = token.split(".")
        forged = jwt.encode(
            {"id": 7, "name": "Alice", "email": "a@x.com", "role": "provider"},
            "x",
            algorithm="HS256",
        ).split(".")[1]
        with pytest.raises(InvalidToken):
            decode_access_token(f"{header}.{forged}.{signature}")

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_rejects_malformed(self, token):
        with pytest.raises(InvalidToken):
            decode_access_token(token)

    def test_rejects_missing_claims(self):
        from app.config import JWT_ALGORITHM, JWT_SECRET

        token = jwt.encode({"sub": "7"}, JWT_SECRET, algorithm=JWT_ALGORITHM)
        with pytest.raises(InvalidToken):
            decode_access_token(token)
