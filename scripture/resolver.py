# scripture/resolver.py
from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Optional, Tuple

from django.utils import timezone

from scripture.generator import ScriptureGenerator
from scripture.stores import ScriptureArchive, ThemeStore
from scripture.types import Scripture, date_key, month_key

logger = logging.getLogger(__name__)


class DailyResolver:
    """
    Point d'entrée "verset du jour" (HTTP à la demande ou tâche planifiée).

    Cache par date : si l'archive contient déjà l'entrée du jour → renvoyer direct,
    sinon générer avec le thème du mois et persister (premier écrivain gagnant).
    """

    def __init__(
        self,
        themes: ThemeStore,
        archive: ScriptureArchive,
        generator: ScriptureGenerator,
        *,
        tz: tzinfo,
        default_theme: str = "Encouragement",
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.themes = themes
        self.archive = archive
        self.generator = generator
        self.tz = tz
        self.default_theme = default_theme
        self.clock = clock

    def today(self) -> date:
        # Calendrier civil de l'assemblée, pas celui de l'hôte
        return self.clock().astimezone(self.tz).date()

    def theme_for(self, year: int, month: int) -> str:
        theme = (self.themes.get(month_key(year, month)) or "").strip()
        if not theme:
            logger.info("No theme set for %s; using default theme %r", month_key(year, month), self.default_theme)
            return self.default_theme
        return theme

    def _resolve(self, on_date: date) -> Tuple[Scripture, bool]:
        key = date_key(on_date)
        cached = self.archive.get(key)
        if cached:
            return cached, False

        theme = self.theme_for(on_date.year, on_date.month)
        scripture = self.generator.generate(theme, on_date.day, on_date.year, on_date.month)
        stored = self.archive.save_if_absent(key, scripture)
        return stored, stored == scripture

    def resolve_for(self, on_date: date) -> Scripture:
        scripture, _ = self._resolve(on_date)
        return scripture

    def resolve_today(self) -> Scripture:
        return self.resolve_for(self.today())

    def run_scheduled(self, on_date: Optional[date] = None) -> Tuple[Scripture, bool]:
        """Variante planifiée : persiste seulement. Retourne (scripture, créée_maintenant)."""
        on_date = on_date or self.today()
        scripture, created = self._resolve(on_date)
        if created:
            logger.info("Daily scripture generated for %s: %s", date_key(on_date), scripture.reference)
        else:
            logger.info("Daily scripture for %s already present: %s", date_key(on_date), scripture.reference)
        return scripture, created
