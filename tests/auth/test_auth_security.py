import os
from unittest import TestCase
from unittest.mock import patch

from auth import security


class TestAccessTokens(TestCase):
    def test_token_round_trip(self):
        token = security.build_access_token(user_id="user-1", email="user@nextmail.com")
        payload = security.decode_access_token(token)
        self.assertEqual(payload["sub"], "user-1")
        self.assertEqual(payload["exp"] - payload["iat"], 60 * 60)

    def test_settings_come_from_environment(self):
        with patch.dict(os.environ, {"JWT_SECRET": "first-secret", "ACCESS_TOKEN_EXPIRE_MIN": "5"}):
            token = security.build_access_token(user_id="user-1", email="user@nextmail.com")
            payload = security.decode_access_token(token)
            self.assertEqual(payload["exp"] - payload["iat"], 5 * 60)
        with patch.dict(os.environ, {"JWT_SECRET": "second-secret"}):
            with self.assertRaises(security.AuthSecurityError):
                security.decode_access_token(token)

    def test_blank_settings_fall_back_to_defaults(self):
        with patch.dict(os.environ, {"JWT_ALG": " ", "ACCESS_TOKEN_EXPIRE_MIN": "soon"}):
            token = security.build_access_token(user_id="user-1", email="user@nextmail.com")
            payload = security.decode_access_token(token)
        self.assertEqual(payload["exp"] - payload["iat"], 60 * 60)

    def test_passwords(self):
        hashed = security.hash_password("123456")
        self.assertTrue(security.verify_password("123456", hashed))
        self.assertFalse(security.verify_password("654321", hashed))
        self.assertFalse(security.verify_password("123456", "not-a-hash"))
