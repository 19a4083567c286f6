"""
Cryptographic utilities for token signing, verification and hashing.

``TokenIssuer`` is stateless: it signs and verifies the two credential kinds
with two independent secrets and owns no storage. Refresh credentials are
persisted by the session store only as one-way digests, see
``hash_token_string``.
"""

import hashlib
from datetime import datetime, timezone as dt_timezone

import jwt
from django.utils import timezone

from drf_token_sessions.choices import TOKEN_KIND
from drf_token_sessions.config import TokenConfig
from drf_token_sessions.types import TokenClaims
from drf_token_sessions.utils.durations import parse_duration
from drf_token_sessions.utils.generators import generate_unique_id
from drf_token_sessions.compat import Any, Dict, Tuple, Callable, Optional

REQUIRED_CLAIMS = ["sub", "type", "jti", "iat", "exp"]


def hash_token_string(raw_token: str) -> str:
    """SHA-256 digest of a raw credential, used as the persisted lookup key."""
    return hashlib.sha256(raw_token.strip().encode("utf-8")).hexdigest()


class TokenIssuer:
    """
    Signs and verifies access and refresh credentials.

    Args:
        config: Secrets, lifetimes and JWT options.
        clock: Returns the current aware datetime. Injected so that tests can
            mint credentials that are already expired.
    """

    def __init__(
        self,
        config: TokenConfig,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.config = config
        self.clock = clock

    def expiry_for(self, lifetime: str) -> datetime:
        """Absolute expiry for a lifetime spec such as ``"15m"``."""
        return self.clock() + parse_duration(lifetime)

    def issue_access(self, subject_id) -> str:
        token, _ = self._sign(
            subject_id,
            TOKEN_KIND.ACCESS,
            self.config.access_secret,
            self.config.access_lifetime,
        )
        return token

    def issue_refresh(self, subject_id) -> Tuple[str, str]:
        """
        Returns:
            A tuple of (token, unique_id) so the caller can persist the id
            without parsing the token again.
        """
        return self._sign(
            subject_id,
            TOKEN_KIND.REFRESH,
            self.config.refresh_secret,
            self.config.refresh_lifetime,
        )

    def verify_access(self, token: str) -> Optional[TokenClaims]:
        return self._verify(token, TOKEN_KIND.ACCESS, self.config.access_secret)

    def verify_refresh(self, token: str) -> Optional[TokenClaims]:
        return self._verify(token, TOKEN_KIND.REFRESH, self.config.refresh_secret)

    def _sign(
        self, subject_id, kind: str, secret: str, lifetime: str
    ) -> Tuple[str, str]:
        now = self.clock()
        unique_id = generate_unique_id()

        payload: Dict[str, Any] = {
            "sub": str(subject_id),
            "type": str(kind),
            "jti": unique_id,
            "iat": int(now.timestamp()),
            "exp": int((now + parse_duration(lifetime)).timestamp()),
        }
        if self.config.issuer:
            payload["iss"] = self.config.issuer
        if self.config.audience:
            payload["aud"] = self.config.audience

        token = jwt.encode(payload, secret, algorithm=self.config.algorithm)
        return token, unique_id

    def _verify(self, token: str, kind: str, secret: str) -> Optional[TokenClaims]:
        # Callers only ever learn "invalid"; the reason stays here.
        if not token or not isinstance(token, str):
            return None

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                audience=self.config.audience,
                leeway=self.config.leeway.total_seconds(),
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidTokenError:
            return None

        if payload.get("type") != kind:
            return None

        try:
            return TokenClaims(
                subject_id=str(payload["sub"]),
                kind=payload["type"],
                unique_id=str(payload["jti"]),
                issued_at=_from_timestamp(payload["iat"]),
                expires_at=_from_timestamp(payload["exp"]),
            )
        except (TypeError, ValueError, OverflowError):
            return None


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=dt_timezone.utc)
