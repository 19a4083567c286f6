"""
Database abstraction layer for refresh sessions.

Every mutation here is a single conditional UPDATE or DELETE so that
concurrent requests coordinate through the database rather than through
in-process locks.
"""

import logging
from contextlib import contextmanager
from datetime import timedelta

from django.utils import timezone
from django.db import DEFAULT_DB_ALIAS, models, transaction, connections
from django.db import IntegrityError, InterfaceError, OperationalError

from drf_token_sessions.compat import Self, Optional
from drf_token_sessions.utils.tokens import hash_token_string
from drf_token_sessions.exceptions import DuplicateUniqueId, StoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(using: Optional[str] = None, timeout: Optional[timedelta] = None):
    """
    Runs a block of store calls in one transaction with a bounded time budget.

    On PostgreSQL a ``timeout`` is applied as a transaction-local
    ``statement_timeout``. Connection failures and timeouts surface as
    ``StoreUnavailable`` so callers can tell them apart from bad credentials.
    """
    alias = using or DEFAULT_DB_ALIAS

    try:
        with transaction.atomic(using=alias):
            connection = connections[alias]
            if timeout and connection.vendor == "postgresql":
                millis = int(timeout.total_seconds() * 1000)
                with connection.cursor() as cursor:
                    cursor.execute(f"SET LOCAL statement_timeout = {millis}")
            yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("Refresh session store unavailable: %s", exc)
        raise StoreUnavailable() from exc


class RefreshSessionQuerySet(models.QuerySet):
    """Custom QuerySet for refresh sessions."""

    def valid(self) -> Self:
        """Sessions that are neither revoked nor past their expiry."""
        return self.filter(revoked=False, expires_at__gt=timezone.now())

    def for_credential(self, raw_token: str) -> Self:
        return self.filter(credential_hash=hash_token_string(raw_token))

    def revoke(self) -> int:
        """Mass revokes the not yet revoked sessions in the current queryset."""
        return self.filter(revoked=False).update(
            revoked=True, revoked_at=timezone.now()
        )


class RefreshSessionManager(models.Manager):
    """Manager for the RefreshSession model."""

    def get_queryset(self) -> RefreshSessionQuerySet:
        return RefreshSessionQuerySet(self.model, using=self._db)

    def valid(self) -> RefreshSessionQuerySet:
        return self.get_queryset().valid()

    def insert(self, raw_token: str, unique_id: str, subject_id, expires_at, **kwargs):
        """
        Persists the row for a newly issued refresh credential.

        Raises:
            DuplicateUniqueId: If a session with ``unique_id`` already exists.
        """
        try:
            with transaction.atomic(using=self.db):
                return self.create(
                    credential_hash=hash_token_string(raw_token),
                    unique_id=unique_id,
                    subject_id=str(subject_id),
                    expires_at=expires_at,
                    **kwargs,
                )
        except IntegrityError as exc:
            if self.filter(unique_id=unique_id).exists():
                raise DuplicateUniqueId(unique_id) from exc
            raise

    def find_valid_by_credential(self, raw_token: str):
        return self.valid().for_credential(raw_token).first()

    def find_valid_by_unique_id(self, unique_id: str):
        return self.valid().filter(unique_id=unique_id).first()

    def revoke_by_credential(self, raw_token: str):
        """
        Marks the session for ``raw_token`` as revoked.

        Idempotent: an already revoked row keeps its original ``revoked_at``
        and is returned as-is. Returns None when no row exists.
        """
        queryset = self.get_queryset().for_credential(raw_token)
        queryset.revoke()
        return queryset.first()

    def consume(self, raw_token: str) -> bool:
        """
        Revokes the session only if it is currently valid.

        Returns True for exactly one of any number of concurrent callers
        presenting the same credential.
        """
        updated = (
            self.valid()
            .for_credential(raw_token)
            .update(revoked=True, revoked_at=timezone.now())
        )
        return updated == 1

    def revoke_all_for_subject(self, subject_id) -> int:
        return self.get_queryset().filter(subject_id=str(subject_id)).revoke()

    def count_valid_for_subject(self, subject_id) -> int:
        return self.valid().filter(subject_id=str(subject_id)).count()

    def purge_expired_and_stale_revoked(self, retention: timedelta) -> int:
        """
        Deletes expired rows and rows revoked longer than ``retention`` ago.
        """
        now = timezone.now()
        deleted, _ = (
            self.get_queryset()
            .filter(
                models.Q(expires_at__lt=now)
                | models.Q(revoked=True, revoked_at__lt=now - retention)
            )
            .delete()
        )
        return deleted
