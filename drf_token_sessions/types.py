"""
Value types passed between the issuer, the session service and the views.
"""

from datetime import datetime

from drf_token_sessions.compat import Any, Dict, NamedTuple


class TokenClaims(NamedTuple):
    """Verified claims of an access or refresh credential."""

    subject_id: str
    kind: str
    unique_id: str
    issued_at: datetime
    expires_at: datetime


class IssuedTokens(NamedTuple):
    """
    A freshly minted credential pair.

    ``lifetimes`` carries the human-readable lifetime specs (e.g. ``"15m"``)
    so clients know when to come back without decoding the tokens.
    """

    access_token: str
    refresh_token: str
    lifetimes: Dict[str, str]

    def as_response(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": "bearer",
            "expires_in": dict(self.lifetimes),
        }


class Identity(NamedTuple):
    """Minimal projection of an authenticated account."""

    id: Any
    email: str
    name: str
