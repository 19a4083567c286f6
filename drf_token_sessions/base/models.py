"""
Core model abstractions for persisted refresh sessions.

One row exists per issued refresh credential. The row, not the signature, is
the source of truth for revocation: a credential is only usable while its row
is unrevoked and unexpired.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from drf_token_sessions.managers import RefreshSessionManager


class BaseModel(models.Model):
    """
    Base abstraction providing creation timestamps and default ordering.
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]


class AbstractRefreshSession(BaseModel):
    """
    An outstanding refresh credential and its lifecycle state.

    The literal credential is never stored; ``credential_hash`` holds its
    SHA-256 digest and ``unique_id`` the ``jti`` claim embedded in it.
    ``subject_id`` references the owning account by identifier only.
    """

    credential_hash = models.CharField(max_length=64, unique=True)
    unique_id = models.CharField(max_length=64, unique=True)
    subject_id = models.CharField(max_length=255, db_index=True)

    expires_at = models.DateTimeField(db_index=True)
    revoked = models.BooleanField(default=False)
    revoked_at = models.DateTimeField(null=True, blank=True)

    device_info = models.CharField(max_length=255, null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    objects: RefreshSessionManager = RefreshSessionManager()

    class Meta(BaseModel.Meta):
        abstract = True
        verbose_name = _("Refresh Session")
        verbose_name_plural = _("Refresh Sessions")
        indexes = [
            models.Index(
                fields=["subject_id", "revoked"], name="refresh_subject_status_idx"
            ),
            models.Index(
                fields=["revoked", "revoked_at"], name="refresh_revoked_purge_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.subject_id} ({self.unique_id})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    @property
    def is_valid(self) -> bool:
        return not self.revoked and not self.is_expired
