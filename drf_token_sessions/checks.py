from django.conf import settings
from django.core.checks import Warning, register

from drf_token_sessions.settings import token_sessions_settings


@register()
def check_secrets_differ_from_secret_key(app_configs, **kwargs):
    warnings = []
    config = token_sessions_settings.config
    secret_key = getattr(settings, "SECRET_KEY", None)

    for name, secret in (
        ("ACCESS_TOKEN_SECRET", config.access_secret),
        ("REFRESH_TOKEN_SECRET", config.refresh_secret),
    ):
        if secret_key and secret == secret_key:
            warnings.append(
                Warning(
                    f"{name} reuses SECRET_KEY.",
                    hint="Use a dedicated signing secret per token kind.",
                    obj=f"settings.DRF_TOKEN_SESSIONS['{name}']",
                    id="drf_token_sessions.W001",
                )
            )
    return warnings
