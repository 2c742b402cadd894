from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLogEntry",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("occurred_at", models.DateTimeField(db_index=True)),
                ("actor_email", models.CharField(db_index=True, max_length=254)),
                ("infant_id", models.CharField(db_index=True, max_length=32)),
                ("field", models.CharField(max_length=64)),
                ("old_value", models.TextField()),
                ("new_value", models.TextField()),
            ],
            options={
                "db_table": "audit_log_entry",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["infant_id", "occurred_at"], name="audit_log_infant_time_idx"),
                ],
            },
        ),
    ]
