"""
Error kinds raised by the token and session lifecycle.

Subject-facing failures are DRF exceptions so the framework's exception
handler renders them with the right status code: malformed headers, bad
credentials and unknown subjects are 401, deactivated accounts are 403 and
store outages are a retryable 503.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    PermissionDenied,
    AuthenticationFailed,
)


class MalformedRequest(AuthenticationFailed):
    default_detail = _("Access token is required")
    default_code = "malformed_request"


class InvalidCredential(AuthenticationFailed):
    default_detail = _("Invalid or expired access token")
    default_code = "invalid_credential"


class SubjectNotFound(AuthenticationFailed):
    default_detail = _("User not found")
    default_code = "subject_not_found"


class AccountDeactivated(PermissionDenied):
    default_detail = _("Your account has been deactivated")
    default_code = "account_deactivated"


class StoreUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("Session store is temporarily unavailable, retry later.")
    default_code = "store_unavailable"


class AccountExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("An account with that username already exists")
    default_code = "account_exists"


class DuplicateUniqueId(Exception):
    """A refresh session with the same unique id already exists."""


class InvalidDurationFormat(ValueError):
    """A lifetime spec did not match ``<integer><s|m|h|d>``."""
