"""Factory wiring the services and stores the UI layer needs."""

import logging
from dataclasses import dataclass

from wordbook.config import WordbookConfig
from wordbook.interfaces import KeyValueStorage
from wordbook.services.api_service import ApiService
from wordbook.services.app_config_service import AppConfigService
from wordbook.services.auth_service import AuthService
from wordbook.services.bundled_data import BundledDataService
from wordbook.services.cache_service import CacheService
from wordbook.services.storage_service import JsonFileStorage
from wordbook.stores import DictionaryStore, SettingsStore, TextsStore

logger = logging.getLogger(__name__)


@dataclass
class Wordbook:
    """Every service and store of one installation, built by create_wordbook."""

    config: WordbookConfig
    storage: KeyValueStorage
    api: ApiService
    auth: AuthService
    app_config: AppConfigService
    dictionary: DictionaryStore
    texts: TextsStore
    settings: SettingsStore

    def start(self) -> None:
        """Restore persisted session state, preferences and bookmarks.

        Call once at startup, before the first screen loads data.
        """
        self.app_config.load()
        if self.auth.restore():
            logger.info("Restored saved session")
        self.settings.load()
        self.dictionary.load_bookmarks()


def create_wordbook(config: WordbookConfig, storage: KeyValueStorage | None = None) -> Wordbook:
    """Create all services and stores for one installation.

    Args:
        config: Wordbook configuration
        storage: Key-value storage to use (defaults to JSON files in
            ``config.storage_dir``)

    Returns:
        Wired Wordbook instance (call ``start()`` before use)
    """
    if storage is None:
        storage = JsonFileStorage(config.storage_dir)

    api = ApiService(config)
    cache = CacheService(storage)
    bundled = BundledDataService(config.bundled_words_path, config.bundled_texts_path)
    app_config = AppConfigService(storage, default_app_type=config.default_app_type)

    return Wordbook(
        config=config,
        storage=storage,
        api=api,
        auth=AuthService(api, storage),
        app_config=app_config,
        dictionary=DictionaryStore(api, cache, bundled, is_privileged=app_config.is_admin),
        texts=TextsStore(api, cache, bundled, is_privileged=app_config.is_admin),
        settings=SettingsStore(cache),
    )
