"""
Orchestration layer for session and token lifecycles.

``SessionService`` is the only writer of refresh sessions. It pairs the
stateless ``TokenIssuer`` with the database-backed store so that refresh
credentials are single-use and revocable even though their signatures stay
valid until natural expiry.
"""

import logging

from drf_token_sessions.config import TokenConfig
from drf_token_sessions.models import get_session_model
from drf_token_sessions.managers import store_operation
from drf_token_sessions.utils.tokens import TokenIssuer
from drf_token_sessions.compat import Optional, TYPE_CHECKING
from drf_token_sessions.settings import token_sessions_settings
from drf_token_sessions.types import IssuedTokens, TokenClaims
from drf_token_sessions.exceptions import DuplicateUniqueId, InvalidCredential

if TYPE_CHECKING:
    from drf_token_sessions.base.models import AbstractRefreshSession

logger = logging.getLogger(__name__)


class SessionService:
    """
    Unified interface for issuing, rotating and revoking credentials.

    Args:
        config: Immutable settings; defaults to the project's current ones.
        issuer: Signer/verifier; defaults to one built from ``config``.
    """

    def __init__(
        self,
        config: Optional[TokenConfig] = None,
        issuer: Optional[TokenIssuer] = None,
    ) -> None:
        self.config = config or token_sessions_settings.config
        self.issuer = issuer or TokenIssuer(self.config)
        self.model = get_session_model()

    @property
    def lifetimes(self) -> dict:
        return {
            "access_token": self.config.access_lifetime,
            "refresh_token": self.config.refresh_lifetime,
        }

    def issue(
        self,
        subject_id,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedTokens:
        """Standard entry point for creating a new authenticated session."""
        access_token = self.issuer.issue_access(subject_id)
        refresh_token = self._persist_refresh(subject_id, device_info, ip_address)

        logger.debug("Issued credential pair for subject %s", subject_id)
        return IssuedTokens(access_token, refresh_token, self.lifetimes)

    def _persist_refresh(self, subject_id, device_info, ip_address) -> str:
        attempts = self.config.unique_id_attempts

        for attempt in range(1, attempts + 1):
            refresh_token, unique_id = self.issuer.issue_refresh(subject_id)
            try:
                with store_operation(timeout=self.config.store_timeout):
                    self.model.objects.insert(
                        refresh_token,
                        unique_id,
                        subject_id,
                        self.issuer.expiry_for(self.config.refresh_lifetime),
                        device_info=device_info,
                        ip_address=ip_address,
                    )
            except DuplicateUniqueId:
                logger.warning(
                    "Refresh session unique id collision (attempt %d/%d)",
                    attempt,
                    attempts,
                )
                if attempt == attempts:
                    raise
                continue
            return refresh_token

    def validate_refresh(self, raw_refresh_token: str) -> Optional[TokenClaims]:
        """
        Dual check: the signature must verify as a refresh credential and the
        store must hold a currently valid row for that exact credential.
        """
        claims = self.issuer.verify_refresh(raw_refresh_token)
        if claims is None:
            return None

        session = self.find_session(raw_refresh_token)
        if session is None:
            return None

        if (
            session.unique_id != claims.unique_id
            or session.subject_id != claims.subject_id
        ):
            return None

        return claims

    def find_session(
        self, raw_refresh_token: str
    ) -> Optional["AbstractRefreshSession"]:
        with store_operation(timeout=self.config.store_timeout):
            return self.model.objects.find_valid_by_credential(raw_refresh_token)

    def rotate(
        self,
        raw_refresh_token: str,
        subject_id,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedTokens:
        """
        Revokes the presented refresh credential and issues a new pair.

        Raises:
            InvalidCredential: Under strict rotation, when the credential is
                not currently valid, belongs to another subject, or was
                consumed by a concurrent rotation.
        """
        if self.config.strict_rotation:
            claims = self.validate_refresh(raw_refresh_token)
            if claims is None or claims.subject_id != str(subject_id):
                raise InvalidCredential("Invalid or expired refresh token")

        with store_operation(timeout=self.config.store_timeout):
            if self.config.strict_rotation:
                if not self.model.objects.consume(raw_refresh_token):
                    raise InvalidCredential("Invalid or expired refresh token")
            else:
                self.model.objects.revoke_by_credential(raw_refresh_token)

            issued = self.issue(subject_id, device_info, ip_address)

        logger.debug("Rotated refresh session for subject %s", subject_id)
        return issued

    def revoke(self, raw_refresh_token: str) -> bool:
        """Single-session logout. True when a matching session existed."""
        with store_operation(timeout=self.config.store_timeout):
            session = self.model.objects.revoke_by_credential(raw_refresh_token)
        return session is not None

    def revoke_all(self, subject_id) -> int:
        """Logout everywhere; also required after every password change."""
        with store_operation(timeout=self.config.store_timeout):
            count = self.model.objects.revoke_all_for_subject(subject_id)

        logger.info("Revoked %d refresh sessions for subject %s", count, subject_id)
        return count

    def active_session_count(self, subject_id) -> int:
        with store_operation(timeout=self.config.store_timeout):
            return self.model.objects.count_valid_for_subject(subject_id)

    def cleanup(self) -> int:
        with store_operation(timeout=self.config.store_timeout):
            deleted = self.model.objects.purge_expired_and_stale_revoked(
                self.config.retention
            )

        if deleted:
            logger.info("Cleaned up %d expired refresh sessions", deleted)
        return deleted


def get_session_service() -> SessionService:
    """Builds a service bound to the project's current settings."""
    return SessionService()
