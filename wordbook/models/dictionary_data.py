"""Data model for the dictionary payload (categories plus grouped words)."""

from dataclasses import dataclass, field

from .category import Category
from .word import Word


@dataclass
class DictionaryData:
    """Categories and their words, grouped by category id string."""

    categories: list[Category] = field(default_factory=list)
    words_by_category: dict[str, list[Word]] = field(default_factory=dict)

    @property
    def word_count(self) -> int:
        return sum(len(words) for words in self.words_by_category.values())

    def __str__(self) -> str:
        return f"DictionaryData(categories={len(self.categories)}, words={self.word_count})"
