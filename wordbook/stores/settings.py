"""Persisted user preferences."""

import logging
from dataclasses import fields, replace

from wordbook.exceptions import PayloadError, StorageError, ValidationError
from wordbook.models import Settings
from wordbook.services.cache_service import SETTINGS_KEY, CacheService
from wordbook.stores.base import Store

logger = logging.getLogger(__name__)

SETTING_NAMES = frozenset(f.name for f in fields(Settings))


class SettingsStore(Store[Settings]):
    """Display preferences with immediate write-through persistence.

    Settings have no remote source: every update is merged, applied in
    memory, announced to subscribers and then written to storage. A failed
    write is logged; the in-memory value still stands.
    """

    def __init__(self, cache: CacheService):
        super().__init__(Settings())
        self.cache = cache

    def load(self) -> Settings:
        """Read persisted settings once at startup.

        Absent or unreadable settings fall back to the defaults.
        """
        try:
            raw = self.cache.read_json(SETTINGS_KEY)
            settings = Settings() if raw is None else Settings.from_dict(raw)
        except (StorageError, PayloadError) as e:
            logger.warning(f"Could not load settings, using defaults: {e}")
            settings = Settings()

        return self._set_state(dark_mode=settings.dark_mode, font_size=settings.font_size)

    def update(self, **partial) -> Settings:
        """Merge changed preferences and persist the full result.

        Args:
            **partial: Any of ``dark_mode`` (bool) and ``font_size`` (1-5)

        Returns:
            The merged settings

        Raises:
            ValidationError: For unknown names or invalid values; nothing
                changes in that case
        """
        unknown = set(partial) - SETTING_NAMES
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        # Validates before anything is applied
        merged = replace(self.state, **partial)

        settings = self._set_state(dark_mode=merged.dark_mode, font_size=merged.font_size)
        self._persist(settings)
        return settings

    def reset(self) -> Settings:
        """Restore and persist the default settings."""
        defaults = Settings()
        settings = self._set_state(dark_mode=defaults.dark_mode, font_size=defaults.font_size)
        self._persist(settings)
        return settings

    def _persist(self, settings: Settings) -> None:
        try:
            self.cache.write_json(SETTINGS_KEY, settings.to_dict())
        except StorageError as e:
            logger.warning(f"Could not persist settings: {e}")
