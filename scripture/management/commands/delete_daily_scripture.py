# scripture/management/commands/delete_daily_scripture.py
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from scripture.services import build_stores


class Command(BaseCommand):
    help = "Supprime le verset archivé d'une date (rattrapage / tests) ; il sera régénéré au prochain appel."

    def add_arguments(self, parser):
        parser.add_argument("date", help="Date YYYY-MM-DD")

    def handle(self, *args, **opts):
        try:
            key = date.fromisoformat(opts["date"]).isoformat()
        except ValueError:
            raise CommandError(f"Date invalide : {opts['date']!r} (attendu YYYY-MM-DD)")

        _, archive = build_stores()
        existing = archive.get(key)
        if not existing:
            self.stdout.write(f"Aucun verset trouvé pour {key}")
            return

        archive.delete(key)
        self.stdout.write(self.style.SUCCESS(f"Verset du {key} supprimé ({existing.reference})"))
