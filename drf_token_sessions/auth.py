"""
Concrete authentication classes for DRF Token Sessions.

``BearerAuthentication`` guards protected views; ``OptionalBearerAuthentication``
serves endpoints with mixed public/private behaviour and never rejects.
"""

from rest_framework.exceptions import PermissionDenied, AuthenticationFailed

from drf_token_sessions.compat import Optional
from drf_token_sessions.base.auth import BaseBearerAuthentication


class BearerAuthentication(BaseBearerAuthentication):
    """
    Requires ``Authorization: Bearer <access token>`` on every request.
    """

    def authenticate_value(self, raw_header: Optional[str]):
        return self.authenticate_credentials(raw_header)


class OptionalBearerAuthentication(BaseBearerAuthentication):
    """
    Attaches an identity when a valid access token is present and treats
    every 401/403 failure as an anonymous request.
    """

    def authenticate_value(self, raw_header: Optional[str]):
        try:
            return self.authenticate_credentials(raw_header)
        except (AuthenticationFailed, PermissionDenied):
            return None
