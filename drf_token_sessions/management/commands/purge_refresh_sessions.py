"""
Deletes expired refresh sessions and revoked ones past the retention window.

Meant to be scheduled (cron, Celery beat, ...); never runs on the request path.
"""

from django.core.management.base import BaseCommand

from drf_token_sessions.services import get_session_service


class Command(BaseCommand):
    help = "Purge expired and stale revoked refresh sessions."

    def handle(self, *args, **options):
        deleted = get_session_service().cleanup()
        self.stdout.write(
            self.style.SUCCESS(f"Purged {deleted} refresh session(s).")
        )
