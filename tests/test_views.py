"""
End-to-end tests for the session endpoints.
"""

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from drf_token_sessions.models import RefreshSession

from tests.factories import make_user


class SessionEndpointTests(APITestCase):
    def setUp(self):
        self.user = make_user()

    def _login(self, **extra):
        response = self.client.post(
            reverse("drf_token_sessions:login"),
            {"username": "tasks_user", "password": "password123"},
            format="json",
            **extra,
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response.data

    def _authorize(self, access_token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token}")

    def test_login_response_shape(self):
        body = self._login(HTTP_USER_AGENT="tasks-cli/1.0")

        self.assertEqual(body["token_type"], "bearer")
        self.assertEqual(
            body["expires_in"], {"access_token": "15m", "refresh_token": "7d"}
        )
        self.assertEqual(RefreshSession.objects.get().device_info, "tasks-cli/1.0")

    def test_login_bad_credentials(self):
        response = self.client.post(
            reverse("drf_token_sessions:login"),
            {"username": "tasks_user", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["detail"], "Invalid username or password")

    def test_login_missing_fields(self):
        response = self.client.post(
            reverse("drf_token_sessions:login"),
            {"username": "tasks_user"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data)

    def test_refresh_rotates_and_old_token_dies(self):
        body = self._login()
        url = reverse("drf_token_sessions:refresh")

        payload = {"refresh_token": body["refresh_token"]}

        first = self.client.post(url, payload, format="json")
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertNotEqual(first.data["refresh_token"], body["refresh_token"])

        replay = self.client.post(url, payload, format="json")
        self.assertEqual(replay.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(replay.data["detail"], "Invalid or expired refresh token")

    def test_logout(self):
        body = self._login()

        response = self.client.post(
            reverse("drf_token_sessions:logout"),
            {"refresh_token": body["refresh_token"]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        refresh = self.client.post(
            reverse("drf_token_sessions:refresh"),
            {"refresh_token": body["refresh_token"]},
            format="json",
        )
        self.assertEqual(refresh.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_all_requires_access_token(self):
        response = self.client.post(reverse("drf_token_sessions:logout-all"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["detail"], "Access token is required")
        self.assertEqual(response["WWW-Authenticate"], 'Bearer realm="api"')

    def test_logout_all(self):
        self._login()
        body = self._login()
        self._authorize(body["access_token"])

        response = self.client.post(reverse("drf_token_sessions:logout-all"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"revoked_sessions": 2})

    def test_refresh_token_cannot_authorize_requests(self):
        body = self._login()
        self._authorize(body["refresh_token"])

        response = self.client.post(reverse("drf_token_sessions:logout-all"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["detail"], "Invalid or expired access token")

    def test_change_password(self):
        body = self._login()
        self._authorize(body["access_token"])

        response = self.client.post(
            reverse("drf_token_sessions:change-password"),
            {"current_password": "password123", "new_password": "n3w-password"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["revoked_sessions"], 1)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("n3w-password"))

    def test_deactivated_account_is_forbidden(self):
        body = self._login()
        self.user.is_active = False
        self.user.save()
        self._authorize(body["access_token"])

        response = self.client.post(reverse("drf_token_sessions:logout-all"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], "Your account has been deactivated")

    def test_register(self):
        response = self.client.post(
            reverse("drf_token_sessions:register"),
            {
                "username": "new_user",
                "password": "s3cret-pass",
                "email": "new@example.com",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["email"], "new@example.com")
        self.assertEqual(response.data["user"]["name"], "new_user")
        self.assertEqual(response.data["token_type"], "bearer")

        self._authorize(response.data["access_token"])
        me = self.client.get(reverse("drf_token_sessions:me"))
        self.assertEqual(me.data["user"]["id"], response.data["user"]["id"])

    def test_register_taken_username(self):
        response = self.client.post(
            reverse("drf_token_sessions:register"),
            {"username": "tasks_user", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(RefreshSession.objects.count(), 0)

    def test_register_missing_fields(self):
        response = self.client.post(
            reverse("drf_token_sessions:register"), {}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data), {"username", "password"})

    def test_me_returns_identity(self):
        body = self._login()
        self._authorize(body["access_token"])

        response = self.client.get(reverse("drf_token_sessions:me"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {
                "user": {
                    "id": self.user.pk,
                    "email": "tasks_user@example.com",
                    "name": "tasks_user",
                }
            },
        )

    def test_me_requires_access_token(self):
        response = self.client.get(reverse("drf_token_sessions:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
