"""Unit tests for Settings validation (secrets, database URL, bounds)."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from optionsdesk.core.config import Settings
from tests import make_settings


class TestSecrets(unittest.TestCase):
    """Both signing secrets are required and must differ."""

    def test_missing_secrets_rejected(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_ACCESS_SECRET="   ")

    def test_identical_secrets_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_ACCESS_SECRET="same", JWT_REFRESH_SECRET="same")

    def test_secrets_read_from_environment(self) -> None:
        env = {"JWT_ACCESS_SECRET": "env-access", "JWT_REFRESH_SECRET": "env-refresh"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.JWT_ACCESS_SECRET.get_secret_value(), "env-access")
        self.assertEqual(settings.ACCESS_TOKEN_EXPIRE_MINUTES, 60)
        self.assertEqual(settings.REFRESH_TOKEN_EXPIRE_DAYS, 7)
        self.assertEqual(settings.BCRYPT_ROUNDS, 10)


class TestOtherSettings(unittest.TestCase):

    def test_database_url_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://root@localhost/db")
        self.assertEqual(
            make_settings(DATABASE_URL=" postgresql+psycopg2://u:p@h/db ").DATABASE_URL,
            "postgresql+psycopg2://u:p@h/db",
        )
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="   ")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(ValidationError):
            make_settings(BCRYPT_ROUNDS=32)

    def test_api_prefix_normalized(self) -> None:
        self.assertEqual(make_settings(API_PREFIX="/api/").API_PREFIX, "/api")
        with self.assertRaises(ValidationError):
            make_settings(API_PREFIX="api")

    def test_log_level(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")


if __name__ == "__main__":
    unittest.main()
