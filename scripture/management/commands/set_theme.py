# scripture/management/commands/set_theme.py
from django.core.management.base import BaseCommand, CommandError

from scripture.services import build_stores
from scripture.types import is_month_key


class Command(BaseCommand):
    help = 'Définit le thème d\'un mois (YYYY-MM). Un thème vide ("") supprime l\'entrée.'

    def add_arguments(self, parser):
        parser.add_argument("month", help="Mois YYYY-MM")
        parser.add_argument("theme", help="Thème du mois")

    def handle(self, *args, **opts):
        month = opts["month"]
        if not is_month_key(month):
            raise CommandError(f"Mois invalide : {month!r} (attendu YYYY-MM)")

        themes, _ = build_stores()
        text = (opts["theme"] or "").strip()
        themes.set(month, text)
        if text:
            self.stdout.write(self.style.SUCCESS(f"Thème de {month} : {text}"))
        else:
            self.stdout.write(self.style.WARNING(f"Thème de {month} supprimé"))
