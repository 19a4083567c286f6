from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class DrfTokenSessionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "drf_token_sessions"
    verbose_name = _("Token Sessions")

    def ready(self):
        # registers the signing secret checks
        import drf_token_sessions.checks  # noqa: F401
