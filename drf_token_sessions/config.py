"""
Immutable configuration for the token issuer and the session service.

The lazy settings container in ``drf_token_sessions.settings`` builds a
``TokenConfig`` from the project's Django settings; tests and callers that
need isolated behaviour can construct one directly and hand it to
``TokenIssuer`` or ``SessionService``.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from django.core.exceptions import ImproperlyConfigured
from django.utils.translation import gettext_lazy as _

from drf_token_sessions.compat import Optional, Tuple
from drf_token_sessions.exceptions import InvalidDurationFormat
from drf_token_sessions.utils.durations import parse_duration

MIN_SECRET_BYTES = 32
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class TokenConfig:
    access_secret: str
    refresh_secret: str
    access_lifetime: str = "15m"
    refresh_lifetime: str = "7d"
    revoked_retention: str = "24h"
    algorithm: str = "HS256"
    issuer: Optional[str] = None
    audience: Optional[str] = None
    leeway: timedelta = timedelta(0)
    store_timeout: Optional[timedelta] = timedelta(seconds=5)
    unique_id_attempts: int = 3
    strict_rotation: bool = True
    header_types: Tuple[str, ...] = field(default=("Bearer",))
    user_id_field: str = "pk"

    def __post_init__(self):
        self._validate_secrets()
        self._validate_lifetimes()

        if self.algorithm not in HMAC_ALGORITHMS:
            raise ImproperlyConfigured(
                _(f"'{self.algorithm}' is not a supported HMAC algorithm.")
            )
        if self.unique_id_attempts < 1:
            raise ImproperlyConfigured(_("UNIQUE_ID_ATTEMPTS must be at least 1."))
        if self.store_timeout is not None and self.store_timeout <= timedelta(0):
            raise ImproperlyConfigured(_("STORE_TIMEOUT must be positive or None."))

    def _validate_secrets(self):
        for name, secret in (
            ("ACCESS_TOKEN_SECRET", self.access_secret),
            ("REFRESH_TOKEN_SECRET", self.refresh_secret),
        ):
            if not secret:
                raise ImproperlyConfigured(_(f"{name} must be set."))
            if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
                raise ImproperlyConfigured(
                    _(f"{name} must be at least {MIN_SECRET_BYTES} bytes long.")
                )

        if self.access_secret == self.refresh_secret:
            raise ImproperlyConfigured(
                _("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ.")
            )

    def _validate_lifetimes(self):
        try:
            access = parse_duration(self.access_lifetime)
            refresh = parse_duration(self.refresh_lifetime)
            parse_duration(self.revoked_retention)
        except InvalidDurationFormat as exc:
            raise ImproperlyConfigured(str(exc)) from exc

        if access <= timedelta(0):
            raise ImproperlyConfigured(_("ACCESS_TOKEN_LIFETIME must be positive."))
        if refresh <= access:
            raise ImproperlyConfigured(
                _("REFRESH_TOKEN_LIFETIME must exceed ACCESS_TOKEN_LIFETIME.")
            )

    @property
    def access_ttl(self) -> timedelta:
        return parse_duration(self.access_lifetime)

    @property
    def refresh_ttl(self) -> timedelta:
        return parse_duration(self.refresh_lifetime)

    @property
    def retention(self) -> timedelta:
        return parse_duration(self.revoked_retention)
