"""Unit tests for optionsdesk.core.security: bcrypt hashing and access/refresh JWTs."""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt

from optionsdesk.core.exceptions import InvalidInputError, InvalidTokenError
from optionsdesk.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from tests import make_settings


def _user(**kwargs: object) -> SimpleNamespace:
    """Stand-in for a User row; token helpers only read id, email and username."""
    defaults = {"id": "4b0c6f5e-0000-4000-8000-000000000001", "email": "a@x.com", "username": "alice"}
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestPasswordHashing(unittest.TestCase):
    """hash_password / verify_password round-trip and failure modes."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret1", rounds=4)
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(verify_password("secret1", hashed))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("secret1", rounds=4)
        self.assertFalse(verify_password("secret2", hashed))

    def test_hashes_are_salted(self) -> None:
        self.assertNotEqual(hash_password("secret1", rounds=4), hash_password("secret1", rounds=4))

    def test_cost_factor_is_encoded_in_hash(self) -> None:
        self.assertTrue(hash_password("secret1", rounds=5).startswith("$2b$05$"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("secret1", ""))

    def test_non_ascii_password(self) -> None:
        hashed = hash_password("sénha-çoração", rounds=4)
        self.assertTrue(verify_password("sénha-çoração", hashed))

    def test_password_at_byte_limit(self) -> None:
        hashed = hash_password("a" * 72, rounds=4)
        self.assertTrue(verify_password("a" * 72, hashed))

    def test_longer_password_sharing_prefix_does_not_verify(self) -> None:
        hashed = hash_password("a" * 72, rounds=4)
        self.assertFalse(verify_password("a" * 72 + "Y", hashed))

    def test_password_over_byte_limit_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            hash_password("a" * 73, rounds=4)
        # 37 two-byte characters: under 72 characters but 74 bytes.
        with self.assertRaises(InvalidInputError):
            hash_password("é" * 37, rounds=4)


class TestTokens(unittest.TestCase):
    """Access and refresh tokens use separate secrets and lifetimes."""

    def setUp(self) -> None:
        self.settings = make_settings()

    def test_access_token_payload(self) -> None:
        token = create_access_token(_user(), self.settings)
        payload = decode_access_token(token, self.settings)
        self.assertEqual(payload.sub, "4b0c6f5e-0000-4000-8000-000000000001")
        self.assertEqual(payload.email, "a@x.com")
        self.assertEqual(payload.username, "alice")
        self.assertAlmostEqual(payload.exp - payload.iat, 3600, delta=1)

    def test_refresh_token_lifetime_is_seven_days(self) -> None:
        token = create_refresh_token(_user(), self.settings)
        payload = decode_refresh_token(token, self.settings)
        self.assertAlmostEqual(payload.exp - payload.iat, 7 * 24 * 3600, delta=1)

    def test_refresh_token_is_not_an_access_token(self) -> None:
        token = create_refresh_token(_user(), self.settings)
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_access_token_is_not_a_refresh_token(self) -> None:
        token = create_access_token(_user(), self.settings)
        with self.assertRaises(InvalidTokenError):
            decode_refresh_token(token, self.settings)

    def test_token_from_other_deployment_rejected(self) -> None:
        other = make_settings(JWT_ACCESS_SECRET="another-access-secret")
        token = create_access_token(_user(), other)
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_tampered_token_rejected(self) -> None:
        token = create_access_token(_user(), self.settings)
        header, body, signature = token.split(".")
        tampered = ".".join([header, body, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])
        with self.assertRaises(InvalidTokenError):
            decode_access_token(tampered, self.settings)

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token = jwt.encode(
            {
                "sub": "u1",
                "email": "a@x.com",
                "username": "alice",
                "iat": past,
                "exp": past + timedelta(hours=1),
            },
            self.settings.JWT_ACCESS_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_missing_claims_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "u1", "iat": now, "exp": now + timedelta(hours=1)},
            self.settings.JWT_ACCESS_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_garbage_rejected(self) -> None:
        with self.assertRaises(InvalidTokenError):
            decode_access_token("not.a.jwt", self.settings)


if __name__ == "__main__":
    unittest.main()
