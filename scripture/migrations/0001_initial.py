from django.db import migrations, models

import scripture.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DailyScripture",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(unique=True)),
                ("reference", models.CharField(max_length=120)),
                ("versions", models.JSONField(default=dict)),
                ("expanded_reference", models.CharField(blank=True, default="", max_length=120)),
                ("expanded_versions", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ("-date",),
            },
        ),
        migrations.CreateModel(
            name="MonthlyTheme",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month_key", models.CharField(max_length=7, unique=True, validators=[scripture.models.month_key_validator])),
                ("text", models.CharField(max_length=200)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("-month_key",),
            },
        ),
    ]
