import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("activations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MetalType",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("symbol", models.CharField(max_length=10)),
                ("name", models.CharField(max_length=100)),
                ("price_per_unit", models.DecimalField(decimal_places=2, max_digits=10)),
                ("unit", models.CharField(default="lb", max_length=20)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "activation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="metal_types",
                        to="activations.activation",
                    ),
                ),
            ],
            options={
                "db_table": "metal_types",
                "ordering": ["symbol"],
            },
        ),
        migrations.AddConstraint(
            model_name="metaltype",
            constraint=models.UniqueConstraint(
                fields=("activation", "symbol"), name="uniq_activation_symbol"
            ),
        ),
    ]
