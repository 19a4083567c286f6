"""
Token kinds carried in the ``type`` claim.

The kind claim keeps a refresh credential from being replayed as an access
credential (and the reverse) even if both were signed with the same key.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TOKEN_KIND(models.TextChoices):
    ACCESS = "access", _("Access")
    REFRESH = "refresh", _("Refresh")
