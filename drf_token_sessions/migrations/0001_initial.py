import swapper
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RefreshSession",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("credential_hash", models.CharField(max_length=64, unique=True)),
                ("unique_id", models.CharField(max_length=64, unique=True)),
                ("subject_id", models.CharField(db_index=True, max_length=255)),
                ("expires_at", models.DateTimeField(db_index=True)),
                ("revoked", models.BooleanField(default=False)),
                ("revoked_at", models.DateTimeField(blank=True, null=True)),
                (
                    "device_info",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Refresh Session",
                "verbose_name_plural": "Refresh Sessions",
                "ordering": ["-created_at"],
                "abstract": False,
                "swappable": swapper.swappable_setting(
                    "drf_token_sessions", "RefreshSession"
                ),
                "indexes": [
                    models.Index(
                        fields=["subject_id", "revoked"],
                        name="refresh_subject_status_idx",
                    ),
                    models.Index(
                        fields=["revoked", "revoked_at"],
                        name="refresh_revoked_purge_idx",
                    ),
                ],
            },
        ),
    ]
