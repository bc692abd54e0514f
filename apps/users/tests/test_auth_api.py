"""API tests for sign up and session endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class SignupAPITests(APITestCase):
    def _payload(self, **overrides) -> dict[str, str]:  # type: ignore
        payload = {
            "firstName": "Demo",
            "lastName": "Lition",
            "email": "demo@example.com",
            "username": "demolition",
            "password": "StrongPass123",
        }
        payload.update(overrides)
        return payload

    def test_signup_returns_user_and_tokens(self) -> None:
        response = self.client.post(reverse("signup"), self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["user"]["email"], "demo@example.com")
        self.assertEqual(response.data["user"]["firstName"], "Demo")
        self.assertIn("access", response.data["tokens"])
        self.assertIn("refresh", response.data["tokens"])
        self.assertNotIn("password", response.data["user"])
        user = User.objects.get(username="demolition")
        self.assertTrue(user.check_password("StrongPass123"))

    def test_duplicate_email_is_rejected(self) -> None:
        User.objects.create_user(
            username="existing",
            email="demo@example.com",
            password="StrongPass123",
            first_name="Old",
            last_name="User",
        )

        response = self.client.post(
            reverse("signup"), self._payload(email="DEMO@example.com"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["message"], "Bad Request")
        self.assertEqual(response.data["errors"]["email"], "User with that email already exists")

    def test_missing_fields_are_reported_together(self) -> None:
        response = self.client.post(reverse("signup"), {"username": "demo@x"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        errors = response.data["errors"]
        for field in ("firstName", "lastName", "email", "password", "username"):
            self.assertIn(field, errors)


class SessionAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            username="fakeuser",
            email="fake@example.com",
            password="StrongPass123",
            first_name="Fake",
            last_name="User",
        )

    def test_login_by_username_and_email(self) -> None:
        for credential in ("fakeuser", "FAKE@example.com"):
            response = self.client.post(
                reverse("session"),
                {"credential": credential, "password": "StrongPass123"},
                format="json",
            )
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
            self.assertEqual(response.data["user"]["id"], self.user.id)
            self.assertIn("access", response.data["tokens"])

    def test_login_with_wrong_password(self) -> None:
        response = self.client.post(
            reverse("session"),
            {"credential": "fakeuser", "password": "nope"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED, response.data)
        self.assertEqual(response.data["message"], "Invalid credentials")

    def test_current_user(self) -> None:
        response = self.client.get(reverse("session"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["user"])

        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("session"))
        self.assertEqual(response.data["user"]["username"], "fakeuser")

    def test_token_refresh(self) -> None:
        login = self.client.post(
            reverse("session"),
            {"credential": "fakeuser", "password": "StrongPass123"},
            format="json",
        )

        response = self.client.post(
            reverse("token-refresh"),
            {"refresh": login.data["tokens"]["refresh"]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
