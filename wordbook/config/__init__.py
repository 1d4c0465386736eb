"""Configuration management for Wordbook."""

from .config import WordbookConfig
from .defaults import create_default_config

__all__ = ["WordbookConfig", "create_default_config"]
