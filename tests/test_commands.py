from io import StringIO
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from django.core.management import call_command

from drf_token_sessions.models import RefreshSession


class PurgeRefreshSessionsCommandTests(TestCase):
    def test_purges_expired_sessions(self):
        now = timezone.now()
        RefreshSession.objects.insert("live", "uid-live", 1, now + timedelta(days=1))
        RefreshSession.objects.insert("dead", "uid-dead", 1, now - timedelta(days=1))
        out = StringIO()

        call_command("purge_refresh_sessions", stdout=out)

        self.assertIn("Purged 1 refresh session(s).", out.getvalue())
        self.assertEqual(
            list(RefreshSession.objects.values_list("unique_id", flat=True)),
            ["uid-live"],
        )
