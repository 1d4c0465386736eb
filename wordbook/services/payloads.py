"""Decoding and encoding of API, cache and bundled payloads.

The backend wraps collections inconsistently (a bare list, or an object
with a ``categories``/``data`` key). These helpers accept every known
shape, turn entries into models and reject anything else with
PayloadError. An empty collection is a valid payload for every entity.
"""

from typing import Any

from wordbook.exceptions import PayloadError
from wordbook.models import Category, DictionaryData, Text, Word


def _unwrap_list(raw: Any, keys: tuple[str, ...], what: str) -> list:
    if isinstance(raw, dict):
        for key in keys:
            if key in raw:
                raw = raw[key]
                break
    if not isinstance(raw, list):
        raise PayloadError(f"Expected a list of {what}, got {type(raw).__name__}")
    return raw


def _require_mapping(entry: Any, what: str) -> dict:
    if not isinstance(entry, dict):
        raise PayloadError(f"Expected {what} object, got {type(entry).__name__}")
    return entry


def parse_categories(raw: Any) -> list[Category]:
    """Decode a category list.

    Raises:
        PayloadError: If the payload has an unexpected shape
    """
    entries = _unwrap_list(raw, ("categories", "data"), "categories")
    return [Category.from_dict(_require_mapping(entry, "category")) for entry in entries]


def parse_words_by_category(raw: Any) -> dict[str, list[Word]]:
    """Decode words grouped by category id.

    Each word is stamped with the category id of the bucket it arrived in
    (unless it already names one), so the owning category is always known.

    Raises:
        PayloadError: If the payload has an unexpected shape
    """
    if isinstance(raw, dict) and isinstance(raw.get("data"), dict):
        raw = raw["data"]
    if not isinstance(raw, dict):
        raise PayloadError(f"Expected words grouped by category, got {type(raw).__name__}")

    grouped: dict[str, list[Word]] = {}
    for key, entries in raw.items():
        try:
            category_id = int(key)
        except (TypeError, ValueError) as e:
            raise PayloadError(f"Invalid category key in words payload: {key!r}") from e
        if not isinstance(entries, list):
            raise PayloadError(f"Words for category {key} must be a list")

        grouped.setdefault(str(category_id), [])
        for entry in entries:
            word = Word.from_dict(_require_mapping(entry, "word"), category_id=category_id)
            # A word naming another category belongs in that bucket
            grouped.setdefault(word.bucket_key, []).append(word)
    return grouped


def parse_words(raw: Any) -> list[Word]:
    """Decode a flat word list whose entries each name their category.

    Raises:
        PayloadError: If the payload has an unexpected shape
    """
    entries = _unwrap_list(raw, ("data", "words"), "words")
    return [Word.from_dict(_require_mapping(entry, "word")) for entry in entries]


def parse_texts(raw: Any) -> list[Text]:
    """Decode a text list.

    Raises:
        PayloadError: If the payload has an unexpected shape
    """
    entries = _unwrap_list(raw, ("data", "texts"), "texts")
    return [Text.from_dict(_require_mapping(entry, "text")) for entry in entries]


def parse_dictionary_bundle(raw: Any) -> DictionaryData:
    """Decode the shipped dictionary dataset (``{"categories", "words"}``).

    Raises:
        PayloadError: If the payload has an unexpected shape
    """
    bundle = _require_mapping(raw, "dictionary bundle")
    if "categories" not in bundle or "words" not in bundle:
        raise PayloadError("Dictionary bundle needs 'categories' and 'words' keys")
    return DictionaryData(
        categories=parse_categories(bundle["categories"]),
        words_by_category=parse_words_by_category(bundle["words"]),
    )


def dump_categories(categories: list[Category]) -> list[dict]:
    return [category.to_dict() for category in categories]


def dump_words_by_category(words_by_category: dict[str, list[Word]]) -> dict[str, list[dict]]:
    return {key: [word.to_dict() for word in words] for key, words in words_by_category.items()}


def dump_words(words: list[Word]) -> list[dict]:
    return [word.to_dict() for word in words]


def dump_texts(texts: list[Text]) -> list[dict]:
    return [text.to_dict() for text in texts]
