"""Persisted application mode (regular user or administrator)."""

import json
import logging

from wordbook.exceptions import StorageError, ValidationError
from wordbook.interfaces import KeyValueStorage
from wordbook.services.cache_service import APP_CONFIG_KEY

logger = logging.getLogger(__name__)

APP_TYPES = ("user", "admin")


class AppConfigService:
    """Hold the app-mode flag that makes a session privileged.

    Admin mode bypasses the once-per-day freshness gate so content editors
    always see the server's current data.
    """

    def __init__(self, storage: KeyValueStorage, default_app_type: str = "user"):
        """Initialize with the mode used when nothing is persisted.

        Args:
            storage: Storage where the mode is persisted
            default_app_type: "user" or "admin"
        """
        self._check(default_app_type)
        self.storage = storage
        self.default_app_type = default_app_type
        self.app_type = default_app_type

    def load(self) -> str:
        """Read the persisted mode, falling back to the default.

        Returns:
            The active app type
        """
        try:
            raw = self.storage.get_item(APP_CONFIG_KEY)
        except StorageError as e:
            logger.warning(f"Could not read app config, using default: {e}")
            raw = None

        app_type = self.default_app_type
        if raw:
            try:
                stored = json.loads(raw).get("appType")
            except (json.JSONDecodeError, AttributeError):
                logger.warning("Invalid app config blob, using default")
                stored = None
            if stored in APP_TYPES:
                app_type = stored

        self.app_type = app_type
        return app_type

    def set_app_type(self, app_type: str) -> None:
        """Switch mode and persist it.

        Raises:
            ValidationError: If app_type is not "user" or "admin"
        """
        self._check(app_type)
        self.app_type = app_type
        try:
            self.storage.set_item(APP_CONFIG_KEY, json.dumps({"appType": app_type}))
        except StorageError as e:
            logger.warning(f"Could not persist app config: {e}")

    def reset(self) -> None:
        """Return to the default mode and drop the persisted flag."""
        self.app_type = self.default_app_type
        try:
            self.storage.remove_item(APP_CONFIG_KEY)
        except StorageError as e:
            logger.warning(f"Could not clear app config: {e}")

    def is_admin(self) -> bool:
        return self.app_type == "admin"

    @staticmethod
    def _check(app_type: str) -> None:
        if app_type not in APP_TYPES:
            raise ValidationError(f"app type must be one of {APP_TYPES}, got {app_type!r}")
