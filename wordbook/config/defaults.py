"""Default configuration values for Wordbook."""

from .config import WordbookConfig


def create_default_config(**overrides) -> WordbookConfig:
    """Create a default configuration with optional overrides.

    Args:
        **overrides: Keyword arguments to override default values

    Returns:
        WordbookConfig with defaults and overrides applied

    Example:
        config = create_default_config(
            api_base_url="https://dictionary.example.com/api",
            request_timeout=5.0,
        )
    """
    return WordbookConfig(**overrides)
