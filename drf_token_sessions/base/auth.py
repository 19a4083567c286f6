"""
Abstract base authentication class for DRF Token Sessions.

Integrates access token verification into the DRF request lifecycle. Access
tokens are never looked up in the database: validity is signature, kind and
expiry, followed by a lookup of the subject's account.
"""

from rest_framework.request import Request
from rest_framework.authentication import BaseAuthentication

from drf_token_sessions.config import TokenConfig
from drf_token_sessions.types import Identity
from drf_token_sessions.utils.tokens import TokenIssuer
from drf_token_sessions.accounts import ensure_active, identity_for, resolve_subject
from drf_token_sessions.compat import TYPE_CHECKING, Tuple, Optional
from drf_token_sessions.settings import token_sessions_settings
from drf_token_sessions.exceptions import (
    SubjectNotFound,
    MalformedRequest,
    InvalidCredential,
)

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractBaseUser


class BaseBearerAuthentication(BaseAuthentication):
    """
    Core template for bearer access token authentication.

    Subclasses decide in ``authenticate_value`` whether failures reject the
    request or fall through as anonymous.
    """

    config: Optional[TokenConfig] = None

    def get_config(self) -> TokenConfig:
        return self.config or token_sessions_settings.config

    def get_issuer(self) -> TokenIssuer:
        return TokenIssuer(self.get_config())

    def authenticate(
        self, request: Request
    ) -> Optional[Tuple["AbstractBaseUser", Identity]]:
        return self.authenticate_value(request.META.get("HTTP_AUTHORIZATION"))

    def authenticate_value(
        self, raw_header: Optional[str]
    ) -> Optional[Tuple["AbstractBaseUser", Identity]]:
        raise NotImplementedError

    def extract_token(self, raw_header: Optional[str]) -> str:
        """
        Splits ``<scheme> <token>`` and checks the scheme against
        AUTH_HEADER_TYPES.
        """
        if not raw_header:
            raise MalformedRequest("Access token is required")

        parts = raw_header.split(" ")
        allowed = [scheme.lower() for scheme in self.get_config().header_types]

        if len(parts) != 2 or parts[0].lower() not in allowed:
            raise MalformedRequest("Invalid token format. Use: Bearer <token>")

        if not parts[1]:
            raise MalformedRequest("Access token is required")

        return parts[1]

    def authenticate_credentials(
        self, raw_header: Optional[str]
    ) -> Tuple["AbstractBaseUser", Identity]:
        """
        Full check; raises on every failure.
        """
        token = self.extract_token(raw_header)
        config = self.get_config()

        claims = self.get_issuer().verify_access(token)
        if claims is None:
            raise InvalidCredential("Invalid or expired access token")

        user = resolve_subject(
            claims.subject_id, config.user_id_field, timeout=config.store_timeout
        )
        if user is None:
            raise SubjectNotFound("User not found")

        ensure_active(user)

        return user, identity_for(user)

    def authenticate_header(self, request: Request) -> str:
        return 'Bearer realm="api"'
