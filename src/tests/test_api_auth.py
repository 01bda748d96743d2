"""API tests for registration, login, and the profile endpoint."""

from __future__ import annotations

from django.test import TestCase
from rest_framework.test import APIClient

from authentication.models import User
from tests.utils import auth_client, create_user, error_categories


class RegisterApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_creates_student(self):
        response = self.client.post(
            "/api/auth/register/",
            {"email": "new@example.com", "password": "longenough"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"], {"message": "Signup successful"})
        self.assertEqual(User.objects.get(email="new@example.com").role, User.Role.STUDENT)

    def test_duplicate_email_conflicts(self):
        create_user("taken@example.com", "longenough")

        response = self.client.post(
            "/api/auth/register/",
            {"email": "TAKEN@example.com", "password": "longenough"},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(error_categories(response), ["duplicate_email"])

    def test_short_password_is_validation_error(self):
        response = self.client.post(
            "/api/auth/register/", {"email": "short@example.com", "password": "abc"}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["field"], "password")
        self.assertFalse(User.objects.exists())


class LoginApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = create_user("Reader@Example.com", "correcthorse", role=User.Role.EDITOR)

    def test_login_returns_token_and_principal(self):
        response = self.client.post(
            "/api/auth/login/",
            {"email": "reader@example.com", "password": "correcthorse"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertTrue(data["token"])
        self.assertEqual(
            data["principal"],
            {"id": str(self.user.id), "email": "Reader@Example.com", "role": "editor"},
        )

    def test_token_from_login_authorizes_me(self):
        token = self.client.post(
            "/api/auth/login/",
            {"email": "reader@example.com", "password": "correcthorse"},
            format="json",
        ).json()["data"]["token"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["id"], str(self.user.id))

    def test_unknown_email_and_wrong_password_look_the_same(self):
        unknown = self.client.post(
            "/api/auth/login/", {"email": "ghost@example.com", "password": "correcthorse"}, format="json"
        )
        wrong = self.client.post(
            "/api/auth/login/", {"email": "reader@example.com", "password": "nothorse!"}, format="json"
        )

        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.json(), wrong.json())
        self.assertEqual(error_categories(wrong), ["invalid_credentials"])

    def test_stale_token_does_not_block_login_or_register(self):
        """Clients that still send an old header can get a fresh token."""
        self.client.credentials(HTTP_AUTHORIZATION="Bearer expired.or.garbage")

        login = self.client.post(
            "/api/auth/login/",
            {"email": "reader@example.com", "password": "correcthorse"},
            format="json",
        )
        register = self.client.post(
            "/api/auth/register/",
            {"email": "second@example.com", "password": "longenough"},
            format="json",
        )
        me = self.client.get("/api/auth/me/")

        self.assertEqual(login.status_code, 200)
        self.assertEqual(register.status_code, 201)
        self.assertEqual(me.status_code, 403)
        self.assertEqual(error_categories(me), ["forbidden"])

    def test_missing_fields_are_validation_errors(self):
        response = self.client.post("/api/auth/login/", {}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual({error["field"] for error in response.json()["errors"]}, {"email", "password"})


class MeApiTests(TestCase):
    def test_anonymous_is_unauthenticated(self):
        response = APIClient().get("/api/auth/me/")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(error_categories(response), ["unauthenticated"])

    def test_deleted_user_with_live_token(self):
        user = create_user("gone@example.com", "longenough")
        client = auth_client(user)
        user.delete()

        response = client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(error_categories(response), ["not_found"])
