"""Configuration classes for Wordbook."""

from dataclasses import dataclass, field
from pathlib import Path

PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class WordbookConfig:
    """Immutable configuration for the dictionary data layer.

    All configuration is frozen (immutable) so that the stores and services
    sharing one instance always agree on endpoints and storage locations.
    """

    # API settings
    api_base_url: str = "http://127.0.0.1:8080"
    request_timeout: float = 10.0  # Seconds before a remote call gives up

    # On-device storage
    storage_dir: Path = field(default_factory=lambda: Path.home() / ".wordbook" / "storage")

    # Datasets shipped inside the package (terminal fallback)
    bundled_words_path: Path = field(default_factory=lambda: PACKAGE_DATA_DIR / "words.json")
    bundled_texts_path: Path = field(default_factory=lambda: PACKAGE_DATA_DIR / "texts.json")

    # Session settings
    default_app_type: str = "user"  # "user" or "admin"

    def __post_init__(self):
        """Convert string paths to Path objects and check the app type."""
        if isinstance(self.storage_dir, str):
            object.__setattr__(self, "storage_dir", Path(self.storage_dir))
        if isinstance(self.bundled_words_path, str):
            object.__setattr__(self, "bundled_words_path", Path(self.bundled_words_path))
        if isinstance(self.bundled_texts_path, str):
            object.__setattr__(self, "bundled_texts_path", Path(self.bundled_texts_path))

        if self.default_app_type not in ("user", "admin"):
            raise ValueError(
                f"default_app_type must be 'user' or 'admin', got {self.default_app_type!r}"
            )
        # Normalize so endpoint joins never produce a double slash
        object.__setattr__(self, "api_base_url", self.api_base_url.rstrip("/"))
