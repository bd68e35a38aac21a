"""Unit tests for app.core.security and role normalisation."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from app.core.config import get_settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    password_problems,
    verify_password,
)
from app.models.user import Role


class TestPasswordProblems(unittest.TestCase):
    """password_problems enforces >= 8 chars, <= 128 chars and at least one digit."""

    def test_acceptable(self) -> None:
        self.assertEqual(password_problems("abcdefg1"), [])
        self.assertEqual(password_problems("1" * 128), [])

    def test_too_short(self) -> None:
        problems = password_problems("abc1")
        self.assertEqual(len(problems), 1)
        self.assertIn("at least 8", problems[0])

    def test_missing_digit(self) -> None:
        problems = password_problems("abcdefgh")
        self.assertEqual(len(problems), 1)
        self.assertIn("digit", problems[0])

    def test_short_and_no_digit_reports_both(self) -> None:
        self.assertEqual(len(password_problems("abc")), 2)

    def test_too_long(self) -> None:
        problems = password_problems("a1" * 65)
        self.assertEqual(len(problems), 1)
        self.assertIn("at most 128", problems[0])

    def test_empty(self) -> None:
        self.assertEqual(len(password_problems("")), 2)

    def test_non_ascii_digit_does_not_count(self) -> None:
        problems = password_problems("abcdefg\u0663")
        self.assertEqual(len(problems), 1)
        self.assertIn("digit", problems[0])


class TestPasswordHashing(unittest.TestCase):
    """hash_password/verify_password wrap bcrypt and never raise on bad digests."""

    def test_round_trip(self) -> None:
        digest = hash_password("correct-horse-1")
        self.assertNotEqual(digest, "correct-horse-1")
        self.assertTrue(digest.startswith("$2"))
        self.assertTrue(verify_password("correct-horse-1", digest))
        self.assertFalse(verify_password("correct-horse-2", digest))

    def test_salted(self) -> None:
        self.assertNotEqual(hash_password("same-pass-1"), hash_password("same-pass-1"))

    def test_malformed_digest_is_false(self) -> None:
        self.assertFalse(verify_password("whatever1", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("whatever1", ""))


class TestAccessToken(unittest.TestCase):
    """create_access_token/decode_access_token use PyJWT with the configured secret."""

    def test_round_trip(self) -> None:
        token, expires_at = create_access_token(sub=42, role="ADMIN")
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "42")
        self.assertEqual(payload["role"], "ADMIN")
        self.assertGreater(expires_at, datetime.now(UTC))

    def test_tampered_token_rejected(self) -> None:
        token, _ = create_access_token(sub=1, role="USER")
        forged = jwt.encode(
            {"sub": "1", "role": "ADMIN", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "some-other-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(forged)
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token + "x")

    def test_expired_token_rejected(self) -> None:
        secret = get_settings().JWT_SECRET.get_secret_value()
        expired = jwt.encode(
            {"sub": "1", "role": "USER", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            secret,
            algorithm=get_settings().JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(expired)

    def test_token_without_sub_rejected(self) -> None:
        secret = get_settings().JWT_SECRET.get_secret_value()
        token = jwt.encode(
            {"role": "USER", "exp": datetime.now(UTC) + timedelta(minutes=1)},
            secret,
            algorithm=get_settings().JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token)

    def test_expiry_follows_settings(self) -> None:
        settings = get_settings().model_copy(update={"JWT_EXPIRE_MINUTES": 5})
        with patch("app.core.security.get_settings", return_value=settings):
            _, expires_at = create_access_token(sub=1, role="USER")
        self.assertLessEqual(expires_at, datetime.now(UTC) + timedelta(minutes=5))


class TestRoleParse(unittest.TestCase):
    """Role.parse accepts case and ROLE_ prefix variations; stores the bare name."""

    def test_canonical(self) -> None:
        self.assertIs(Role.parse("ADMIN"), Role.ADMIN)
        self.assertIs(Role.parse("USER"), Role.USER)

    def test_case_and_whitespace(self) -> None:
        self.assertIs(Role.parse(" admin "), Role.ADMIN)
        self.assertIs(Role.parse("User"), Role.USER)

    def test_prefix_is_stripped(self) -> None:
        self.assertIs(Role.parse("ROLE_ADMIN"), Role.ADMIN)
        self.assertIs(Role.parse("role_user"), Role.USER)

    def test_member_passes_through(self) -> None:
        self.assertIs(Role.parse(Role.ADMIN), Role.ADMIN)

    def test_unknown_role(self) -> None:
        with self.assertRaises(ValueError):
            Role.parse("SUPERUSER")
        with self.assertRaises(ValueError):
            Role.parse("")

    def test_value_has_no_prefix(self) -> None:
        self.assertEqual(Role.ADMIN.value, "ADMIN")


if __name__ == "__main__":
    unittest.main()
