"""Reader for the datasets shipped inside the package."""

import json
import logging
from pathlib import Path

from wordbook.exceptions import BundledDataError, PayloadError
from wordbook.models import DictionaryData, Text
from wordbook.services.payloads import parse_dictionary_bundle, parse_texts

logger = logging.getLogger(__name__)


class BundledDataService:
    """Load the terminal-fallback datasets bundled with the application."""

    def __init__(self, words_path: Path, texts_path: Path):
        """Initialize with the paths of the bundled JSON files.

        Args:
            words_path: JSON file with ``{"categories": [...], "words": {...}}``
            texts_path: JSON file with a list of texts
        """
        self.words_path = words_path
        self.texts_path = texts_path

    def load_dictionary(self) -> DictionaryData:
        """Read the bundled categories and words.

        Raises:
            BundledDataError: If the file is missing or malformed
        """
        raw = self._read_json(self.words_path)
        try:
            data = parse_dictionary_bundle(raw)
        except PayloadError as e:
            raise BundledDataError(f"Malformed bundled dictionary {self.words_path}: {e}") from e
        logger.debug(f"Loaded bundled dictionary: {data}")
        return data

    def load_texts(self) -> list[Text]:
        """Read the bundled texts.

        Raises:
            BundledDataError: If the file is missing or malformed
        """
        raw = self._read_json(self.texts_path)
        try:
            return parse_texts(raw)
        except PayloadError as e:
            raise BundledDataError(f"Malformed bundled texts {self.texts_path}: {e}") from e

    @staticmethod
    def _read_json(path: Path):
        if not path.exists():
            raise BundledDataError(f"Bundled dataset not found at: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise BundledDataError(f"Error parsing bundled dataset {path}: {e}") from e
        except OSError as e:
            raise BundledDataError(f"Error reading bundled dataset {path}: {e}") from e
