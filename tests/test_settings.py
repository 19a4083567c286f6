from datetime import timedelta

from django.conf import settings as django_settings
from django.test import SimpleTestCase, override_settings
from django.core.exceptions import ImproperlyConfigured

from drf_token_sessions.settings import (
    DEFAULTS,
    TokenSessionsSettings,
    token_sessions_settings,
)

from tests.factories import TOKEN_SETTINGS


class SettingsTests(SimpleTestCase):
    def test_default_values_are_loaded(self):
        settings = TokenSessionsSettings(user_settings=TOKEN_SETTINGS)
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.REVOKED_RETENTION, DEFAULTS["REVOKED_RETENTION"])

    def test_user_settings_override_defaults(self):
        settings = TokenSessionsSettings(
            user_settings={**TOKEN_SETTINGS, "ACCESS_TOKEN_LIFETIME": "5m"}
        )
        self.assertEqual(settings.ACCESS_TOKEN_LIFETIME, "5m")
        self.assertEqual(settings.config.access_ttl, timedelta(minutes=5))

    def test_missing_secrets_are_rejected(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "must be set"):
            TokenSessionsSettings(user_settings={})

    def test_invalid_type_raises_error(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "invalid type"):
            TokenSessionsSettings(
                user_settings={**TOKEN_SETTINGS, "UNIQUE_ID_ATTEMPTS": "three"}
            )

    def test_lifetimes_must_be_specs_not_timedeltas(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "invalid type"):
            TokenSessionsSettings(
                user_settings={
                    **TOKEN_SETTINGS,
                    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=5),
                }
            )

    def test_unknown_setting_is_rejected(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "Unknown setting"):
            TokenSessionsSettings(user_settings={**TOKEN_SETTINGS, "TYPO": 1})

    def test_reload_clears_cache(self):
        settings = TokenSessionsSettings(user_settings=TOKEN_SETTINGS)
        self.assertTrue(settings.STRICT_ROTATION)

        settings.reload(new_user_settings={**TOKEN_SETTINGS, "STRICT_ROTATION": False})
        self.assertFalse(settings.STRICT_ROTATION)
        self.assertFalse(settings.config.strict_rotation)

    def test_attribute_error_on_invalid_setting(self):
        settings = TokenSessionsSettings(user_settings=TOKEN_SETTINGS)
        with self.assertRaises(AttributeError):
            _ = settings.NON_EXISTENT_SETTING

    def test_swapper_setting_is_synced(self):
        self.assertEqual(
            django_settings.DRF_TOKEN_SESSIONS_REFRESHSESSION_MODEL,
            "drf_token_sessions.RefreshSession",
        )

    def test_override_settings_reloads_global_container(self):
        with override_settings(
            DRF_TOKEN_SESSIONS={**TOKEN_SETTINGS, "REFRESH_TOKEN_LIFETIME": "1d"}
        ):
            self.assertEqual(token_sessions_settings.config.refresh_lifetime, "1d")
        self.assertEqual(token_sessions_settings.config.refresh_lifetime, "7d")

    def test_non_positive_store_timeout_is_rejected(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "STORE_TIMEOUT"):
            TokenSessionsSettings(
                user_settings={
                    **TOKEN_SETTINGS,
                    "STORE_TIMEOUT": timedelta(seconds=-1),
                }
            )
