"""
Account-side collaborator of the session lifecycle.

User records belong to the project's user model; this module only decides
when sessions are started, rotated and torn down around account events.
Every state transition is an explicit call: registration and login issue a
session, a password change revokes every session of the account.
"""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login

from drf_token_sessions.managers import store_operation
from drf_token_sessions.types import IssuedTokens, Identity
from drf_token_sessions.compat import Tuple, Optional, TYPE_CHECKING
from drf_token_sessions.services import SessionService, get_session_service
from drf_token_sessions.exceptions import (
    AccountExists,
    SubjectNotFound,
    InvalidCredential,
    AccountDeactivated,
)

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractBaseUser

logger = logging.getLogger(__name__)


def resolve_subject(subject_id, user_id_field: str = "pk", timeout=None):
    """
    Looks up the account behind a token subject. Returns None when unknown.
    """
    User = get_user_model()
    with store_operation(timeout=timeout):
        try:
            return User._default_manager.filter(**{user_id_field: subject_id}).first()
        except (ValueError, TypeError):
            # Subject does not fit the primary key type, e.g. "abc" for an int pk.
            return None


def subject_id_for(user: "AbstractBaseUser", user_id_field: str = "pk") -> str:
    return str(getattr(user, user_id_field))


def identity_for(user: "AbstractBaseUser") -> Identity:
    """Projects a user onto the fields downstream handlers may rely on."""
    email_field = user.get_email_field_name()
    get_full_name = getattr(user, "get_full_name", None)
    name = (get_full_name() if callable(get_full_name) else "") or user.get_username()

    return Identity(
        id=user.pk,
        email=getattr(user, email_field, "") or "",
        name=name,
    )


def ensure_active(user: "AbstractBaseUser") -> None:
    if not getattr(user, "is_active", True):
        raise AccountDeactivated()


class AccountService:
    """Account events that start or end sessions."""

    def __init__(self, sessions: Optional[SessionService] = None) -> None:
        self.sessions = sessions or get_session_service()
        self.user_id_field = self.sessions.config.user_id_field

    def _subject_id(self, user) -> str:
        return subject_id_for(user, self.user_id_field)

    def register(
        self,
        password: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
        **fields,
    ) -> Tuple["AbstractBaseUser", IssuedTokens]:
        """
        Creates an account and starts its first session.

        Raises:
            AccountExists: If the username is already taken.
        """
        User = get_user_model()
        manager = User._default_manager
        username = fields.get(User.USERNAME_FIELD)

        with store_operation(timeout=self.sessions.config.store_timeout):
            if manager.filter(**{User.USERNAME_FIELD: username}).exists():
                raise AccountExists()

            user = manager.create_user(password=password, **fields)
            issued = self.sessions.issue(
                self._subject_id(user), device_info=device_info, ip_address=ip_address
            )

        logger.info("New user registered: %s", user.pk)
        return user, issued

    def login(
        self,
        username: str,
        password: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple["AbstractBaseUser", IssuedTokens]:
        User = get_user_model()
        try:
            user = User._default_manager.get_by_natural_key(username)
        except User.DoesNotExist:
            # Hash anyway so response timing does not reveal unknown usernames.
            User().set_password(password)
            raise InvalidCredential("Invalid username or password") from None

        if not user.check_password(password):
            raise InvalidCredential("Invalid username or password")

        ensure_active(user)
        update_last_login(None, user)
        logger.info("User logged in: %s", user.pk)

        issued = self.sessions.issue(
            self._subject_id(user), device_info=device_info, ip_address=ip_address
        )
        return user, issued

    def refresh(
        self,
        refresh_token: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedTokens:
        claims = self.sessions.validate_refresh(refresh_token)
        if claims is None:
            raise InvalidCredential("Invalid or expired refresh token")

        user = resolve_subject(
            claims.subject_id,
            self.user_id_field,
            timeout=self.sessions.config.store_timeout,
        )
        if user is None:
            raise SubjectNotFound()
        ensure_active(user)

        issued = self.sessions.rotate(
            refresh_token,
            claims.subject_id,
            device_info=device_info,
            ip_address=ip_address,
        )
        logger.debug("Tokens refreshed for user: %s", user.pk)
        return issued

    def logout(self, refresh_token: str) -> bool:
        revoked = self.sessions.revoke(refresh_token)
        logger.debug("Logout revoked=%s", revoked)
        return revoked

    def logout_all(self, user: "AbstractBaseUser") -> int:
        count = self.sessions.revoke_all(self._subject_id(user))
        logger.info("User logged out from all devices: %s", user.pk)
        return count

    def change_password(
        self, user: "AbstractBaseUser", current_password: str, new_password: str
    ) -> int:
        """
        Sets a new password and revokes every refresh session of the account.

        Returns:
            The number of sessions revoked.
        """
        if not user.check_password(current_password):
            raise InvalidCredential("Current password is incorrect")

        # A store failure rolls the new password back with the revocation.
        with store_operation(timeout=self.sessions.config.store_timeout):
            user.set_password(new_password)
            user.save(update_fields=["password"])
            count = self.sessions.revoke_all(self._subject_id(user))

        logger.info("Password changed for user: %s", user.pk)
        return count
