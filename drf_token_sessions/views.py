"""
Thin DRF endpoints over ``AccountService``.

Request bodies are read directly; anything beyond "field present and a
string" is the host project's concern.
"""

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from drf_token_sessions.accounts import AccountService, identity_for
from drf_token_sessions.auth import BearerAuthentication


def require_fields(request: Request, *names: str) -> dict:
    errors, values = {}, {}
    for name in names:
        value = request.data.get(name)
        if not value or not isinstance(value, str):
            errors[name] = [_("This field is required.")]
        else:
            values[name] = value

    if errors:
        raise ValidationError(errors)
    return values


def client_metadata(request: Request) -> dict:
    return {
        "device_info": (request.META.get("HTTP_USER_AGENT") or "")[:255] or None,
        "ip_address": request.META.get("REMOTE_ADDR") or None,
    }


class PublicAPIView(APIView):
    authentication_classes = ()
    permission_classes = (AllowAny,)

    def get_authenticate_header(self, request: Request) -> str:
        # Keeps credential failures on unauthenticated endpoints at 401.
        return BearerAuthentication().authenticate_header(request)


class ProtectedAPIView(APIView):
    authentication_classes = (BearerAuthentication,)
    permission_classes = (IsAuthenticated,)


class RegisterView(PublicAPIView):
    def post(self, request: Request) -> Response:
        username_field = get_user_model().USERNAME_FIELD
        data = require_fields(request, username_field, "password")

        email = request.data.get("email")
        if isinstance(email, str) and email:
            data["email"] = email

        user, issued = AccountService().register(
            data.pop("password"), **client_metadata(request), **data
        )
        return Response(
            {"user": identity_for(user)._asdict(), **issued.as_response()},
            status=status.HTTP_201_CREATED,
        )


class LoginView(PublicAPIView):
    def post(self, request: Request) -> Response:
        data = require_fields(request, "username", "password")
        _user, issued = AccountService().login(
            data["username"], data["password"], **client_metadata(request)
        )
        return Response(issued.as_response(), status=status.HTTP_200_OK)


class TokenRefreshView(PublicAPIView):
    def post(self, request: Request) -> Response:
        data = require_fields(request, "refresh_token")
        issued = AccountService().refresh(
            data["refresh_token"], **client_metadata(request)
        )
        return Response(issued.as_response(), status=status.HTTP_200_OK)


class LogoutView(PublicAPIView):
    def post(self, request: Request) -> Response:
        data = require_fields(request, "refresh_token")
        AccountService().logout(data["refresh_token"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class LogoutAllView(ProtectedAPIView):
    def post(self, request: Request) -> Response:
        count = AccountService().logout_all(request.user)
        return Response({"revoked_sessions": count}, status=status.HTTP_200_OK)


class ChangePasswordView(ProtectedAPIView):
    def post(self, request: Request) -> Response:
        data = require_fields(request, "current_password", "new_password")
        count = AccountService().change_password(
            request.user, data["current_password"], data["new_password"]
        )
        return Response(
            {
                "detail": _("Password changed successfully. Please login again."),
                "revoked_sessions": count,
            },
            status=status.HTTP_200_OK,
        )


class MeView(ProtectedAPIView):
    def get(self, request: Request) -> Response:
        return Response({"user": request.auth._asdict()}, status=status.HTTP_200_OK)
