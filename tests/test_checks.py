from django.test import SimpleTestCase, override_settings

from drf_token_sessions.checks import check_secrets_differ_from_secret_key

from tests.factories import TOKEN_SETTINGS


class SecretKeyCheckTests(SimpleTestCase):
    def test_dedicated_secrets_pass(self):
        self.assertEqual(check_secrets_differ_from_secret_key(None), [])

    @override_settings(SECRET_KEY=TOKEN_SETTINGS["ACCESS_TOKEN_SECRET"])
    def test_reused_secret_key_warns(self):
        warnings = check_secrets_differ_from_secret_key(None)

        self.assertEqual(len(warnings), 1)
        self.assertEqual(warnings[0].id, "drf_token_sessions.W001")
        self.assertIn("ACCESS_TOKEN_SECRET", warnings[0].msg)
