"""
Configuration management for DRF Token Sessions.

This module handles the loading, validation, and caching of library settings
from the ``DRF_TOKEN_SESSIONS`` Django setting. Validated values are frozen
into a ``TokenConfig`` that the issuer and the session service receive at
construction, so no component reads ambient process state while it works.
"""

from datetime import timedelta

from django.conf import settings
from django.test.signals import setting_changed
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ImproperlyConfigured

from drf_token_sessions.config import TokenConfig


DEFAULTS = {
    # Signing
    "ACCESS_TOKEN_SECRET": None,
    "REFRESH_TOKEN_SECRET": None,
    "JWT_ALGORITHM": "HS256",
    "JWT_ISSUER": None,
    "JWT_AUDIENCE": None,
    "LEEWAY": timedelta(seconds=0),
    # Lifetimes
    "ACCESS_TOKEN_LIFETIME": "15m",
    "REFRESH_TOKEN_LIFETIME": "7d",
    "REVOKED_RETENTION": "24h",
    # Session store
    "SESSION_MODEL": "drf_token_sessions.RefreshSession",
    "STORE_TIMEOUT": timedelta(seconds=5),
    "UNIQUE_ID_ATTEMPTS": 3,
    "STRICT_ROTATION": True,
    # Request authentication
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_FIELD": "pk",
}

TYPE_VALIDATORS = {
    "ACCESS_TOKEN_SECRET": (str, type(None)),
    "REFRESH_TOKEN_SECRET": (str, type(None)),
    "JWT_ALGORITHM": str,
    "JWT_ISSUER": (str, type(None)),
    "JWT_AUDIENCE": (str, type(None)),
    "LEEWAY": timedelta,
    "ACCESS_TOKEN_LIFETIME": str,
    "REFRESH_TOKEN_LIFETIME": str,
    "REVOKED_RETENTION": str,
    "SESSION_MODEL": str,
    "STORE_TIMEOUT": (timedelta, type(None)),
    "UNIQUE_ID_ATTEMPTS": int,
    "STRICT_ROTATION": bool,
    "AUTH_HEADER_TYPES": (list, tuple),
    "USER_ID_FIELD": str,
}


class TokenSessionsSettings:
    """
    Lazy settings container for DRF Token Sessions.
    """

    __slots__ = ("_user_settings", "_cache", "_config")

    def __init__(self, user_settings=None):
        self._user_settings = user_settings or {}
        self._cache = {}
        self._config = None
        self._validate_all()
        self._sync_swapper()

    def _get_setting(self, setting_name: str):
        return self._user_settings.get(setting_name, DEFAULTS[setting_name])

    def __getattr__(self, setting_name: str):
        if setting_name not in DEFAULTS:
            raise AttributeError(_(f"Invalid setting: '{setting_name}'."))

        if setting_name in self._cache:
            return self._cache[setting_name]

        value = self._get_setting(setting_name)
        self._cache[setting_name] = value
        return value

    @property
    def config(self) -> TokenConfig:
        """The validated, immutable view of the current settings."""
        return self._config

    def _validate_all(self):
        self._validate_unknown_settings()
        self._validate_primitive_types()
        self._config = self._build_config()

    def _validate_unknown_settings(self):
        for setting_name in self._user_settings:
            if setting_name not in DEFAULTS:
                raise ImproperlyConfigured(_(f"Unknown setting: '{setting_name}'."))

    def _validate_primitive_types(self):
        for setting_name, expected_types in TYPE_VALIDATORS.items():
            value = self._get_setting(setting_name)
            if not isinstance(value, expected_types):
                raise ImproperlyConfigured(_(f"'{setting_name}' has invalid type."))

    def _build_config(self) -> TokenConfig:
        # TokenConfig enforces secret strength and lifetime ordering.
        return TokenConfig(
            access_secret=self._get_setting("ACCESS_TOKEN_SECRET"),
            refresh_secret=self._get_setting("REFRESH_TOKEN_SECRET"),
            access_lifetime=self._get_setting("ACCESS_TOKEN_LIFETIME"),
            refresh_lifetime=self._get_setting("REFRESH_TOKEN_LIFETIME"),
            revoked_retention=self._get_setting("REVOKED_RETENTION"),
            algorithm=self._get_setting("JWT_ALGORITHM"),
            issuer=self._get_setting("JWT_ISSUER"),
            audience=self._get_setting("JWT_AUDIENCE"),
            leeway=self._get_setting("LEEWAY"),
            store_timeout=self._get_setting("STORE_TIMEOUT"),
            unique_id_attempts=self._get_setting("UNIQUE_ID_ATTEMPTS"),
            strict_rotation=self._get_setting("STRICT_ROTATION"),
            header_types=tuple(self._get_setting("AUTH_HEADER_TYPES")),
            user_id_field=self._get_setting("USER_ID_FIELD"),
        )

    def _sync_swapper(self):
        session_model = self._get_setting("SESSION_MODEL")
        setattr(settings, "DRF_TOKEN_SESSIONS_REFRESHSESSION_MODEL", session_model)

    def reload(self, new_user_settings=None):
        self._user_settings = new_user_settings or {}
        self._cache.clear()
        self._validate_all()
        self._sync_swapper()


token_sessions_settings = TokenSessionsSettings(
    getattr(settings, "DRF_TOKEN_SESSIONS", None)
)


def reload_token_sessions_settings(*args, **kwargs):
    if kwargs.get("setting") == "DRF_TOKEN_SESSIONS":
        token_sessions_settings.reload(kwargs.get("value"))


setting_changed.connect(reload_token_sessions_settings)
