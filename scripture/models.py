from django.core.validators import RegexValidator
from django.db import models

from scripture.types import MAX_REFERENCE_LENGTH, MONTH_KEY_PATTERN

month_key_validator = RegexValidator(MONTH_KEY_PATTERN, "Format attendu : YYYY-MM")


class MonthlyTheme(models.Model):
    month_key = models.CharField(max_length=7, unique=True, validators=[month_key_validator])  # "2025-03"
    text = models.CharField(max_length=200)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-month_key",)

    def __str__(self):
        return f"{self.month_key} — {self.text}"


class DailyScripture(models.Model):
    # Une entrée par date (write-once en régime normal)
    date = models.DateField(unique=True)
    reference = models.CharField(max_length=MAX_REFERENCE_LENGTH)
    versions = models.JSONField(default=dict)  # {"KJV": "...", "NIV": "..."}
    expanded_reference = models.CharField(max_length=MAX_REFERENCE_LENGTH, blank=True, default="")
    expanded_versions = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-date",)

    def __str__(self):
        return f"{self.date.isoformat()} {self.reference}"
