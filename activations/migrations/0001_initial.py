import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Activation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("activation_code", models.CharField(max_length=100, unique=True)),
                ("company_name", models.CharField(max_length=255)),
                ("contact_person", models.CharField(blank=True, max_length=255, null=True)),
                ("contact_phone", models.CharField(blank=True, max_length=50, null=True)),
                ("contact_email", models.CharField(blank=True, max_length=255, null=True)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(db_index=True, default=False)),
                ("max_users", models.PositiveIntegerField(default=3)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "activations",
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddIndex(
            model_name="activation",
            index=models.Index(
                fields=["is_active", "expires_at"], name="activations_active_exp_idx"
            ),
        ),
    ]
