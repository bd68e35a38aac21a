"""Unit tests for request schemas in app.schemas.users."""

import unittest

from pydantic import ValidationError

from app.models.user import Role
from app.schemas.users import (
    AdminUserUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)


class TestRegisterRequest(unittest.TestCase):
    """RegisterRequest validates username, email and password."""

    def test_valid(self) -> None:
        body = RegisterRequest(username="  carol ", email="carol@example.com", password="password1")
        self.assertEqual(body.username, "carol")
        self.assertEqual(body.email, "carol@example.com")

    def test_email_optional(self) -> None:
        self.assertIsNone(RegisterRequest(username="carol", password="password1").email)

    def test_role_in_body_is_ignored(self) -> None:
        body = RegisterRequest.model_validate(
            {"username": "carol", "password": "password1", "role": "ADMIN"}
        )
        self.assertFalse(hasattr(body, "role"))

    def test_weak_passwords(self) -> None:
        for password in ("short1", "nodigitshere", ""):
            with self.assertRaises(ValidationError, msg=password):
                RegisterRequest(username="carol", password=password)

    def test_blank_username(self) -> None:
        with self.assertRaises(ValidationError):
            RegisterRequest(username="   ", password="password1")

    def test_long_username(self) -> None:
        with self.assertRaises(ValidationError):
            RegisterRequest(username="x" * 256, password="password1")

    def test_bad_email(self) -> None:
        with self.assertRaises(ValidationError):
            RegisterRequest(username="carol", email="not-an-email", password="password1")


class TestProfileUpdateRequest(unittest.TestCase):
    def test_password_required(self) -> None:
        with self.assertRaises(ValidationError):
            ProfileUpdateRequest(email="a@example.com")

    def test_password_rule_applies(self) -> None:
        with self.assertRaises(ValidationError):
            ProfileUpdateRequest(password="abcdefgh")
        self.assertEqual(ProfileUpdateRequest(password="abcdefg1").password, "abcdefg1")


class TestAdminUserUpdateRequest(unittest.TestCase):
    """Role is normalised to the canonical enum."""

    def _body(self, role: object) -> AdminUserUpdateRequest:
        return AdminUserUpdateRequest.model_validate(
            {"username": "dave", "password": "password1", "role": role}
        )

    def test_prefixed_lowercase_role(self) -> None:
        self.assertIs(self._body("ROLE_admin").role, Role.ADMIN)

    def test_plain_role(self) -> None:
        self.assertIs(self._body("USER").role, Role.USER)

    def test_unknown_role(self) -> None:
        with self.assertRaises(ValidationError):
            self._body("ROOT")

    def test_non_string_role(self) -> None:
        with self.assertRaises(ValidationError):
            self._body(1)


class TestUserResponse(unittest.TestCase):
    def test_from_attributes_excludes_password(self) -> None:
        class Row:
            id = 5
            username = "erin"
            email = None
            role = "USER"
            password_hash = "$2b$04$secret"

        data = UserResponse.model_validate(Row()).model_dump()
        self.assertEqual(data, {"id": 5, "username": "erin", "email": None, "role": Role.USER})


if __name__ == "__main__":
    unittest.main()
