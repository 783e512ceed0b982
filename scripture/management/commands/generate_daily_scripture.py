# scripture/management/commands/generate_daily_scripture.py
from __future__ import annotations

import json
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from scripture.exceptions import ScriptureError
from scripture.services import build_daily_resolver
from scripture.types import date_key
from teatime.tasks import notify_daily_scripture


class Command(BaseCommand):
    help = (
        "Génère (si absent) le verset du jour dans le fuseau configuré et le persiste. "
        "Variante manuelle de la tâche planifiée."
    )

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Date cible YYYY-MM-DD (défaut : aujourd'hui dans SCRIPTURE_TIMEZONE)")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Génère et affiche le verset sans rien persister.",
        )
        parser.add_argument(
            "--notify",
            action="store_true",
            help="Envoie la notification FCM si une nouvelle entrée a été créée.",
        )

    def handle(self, *args, **opts):
        resolver = build_daily_resolver()
        try:
            on_date = date.fromisoformat(opts["date"]) if opts.get("date") else resolver.today()
        except ValueError:
            raise CommandError(f"--date doit être au format YYYY-MM-DD, reçu {opts['date']!r}")
        key = date_key(on_date)

        try:
            if opts["dry_run"]:
                cached = resolver.archive.get(key)
                if cached:
                    self.stdout.write(self.style.WARNING(f"[DRY-RUN] {key} déjà en archive : {cached.reference}"))
                    return
                theme = resolver.theme_for(on_date.year, on_date.month)
                scripture = resolver.generator.generate(theme, on_date.day, on_date.year, on_date.month)
                self.stdout.write(self.style.WARNING(f"[DRY-RUN] {key} (thème {theme!r}) : {scripture.reference}"))
                self.stdout.write(json.dumps(scripture.to_dict(), indent=2, ensure_ascii=False))
                return

            scripture, created = resolver.run_scheduled(on_date)
        except ScriptureError as exc:
            raise CommandError(f"Échec de génération pour {key}: {exc}") from exc

        if created and opts["notify"]:
            sent = notify_daily_scripture(scripture, key)
            self.stdout.write(f"[FCM] sent={int(sent)}")

        status = "créé" if created else "déjà présent"
        self.stdout.write(self.style.SUCCESS(f"Verset du {key} {status} : {scripture.reference}"))
