"""Business logic services for Wordbook."""

from .api_service import ApiService
from .app_config_service import AppConfigService
from .auth_service import AuthService
from .bundled_data import BundledDataService
from .cache_service import CacheService
from .freshness import should_fetch_remote
from .storage_service import JsonFileStorage
from .tiered_loader import TieredLoader

__all__ = [
    "ApiService",
    "AppConfigService",
    "AuthService",
    "BundledDataService",
    "CacheService",
    "JsonFileStorage",
    "TieredLoader",
    "should_fetch_remote",
]
