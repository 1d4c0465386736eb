"""Data models for vocabulary words and their attachments."""

from dataclasses import dataclass, field

from wordbook.exceptions import PayloadError


@dataclass(frozen=True)
class Attachment:
    """Media attached to a word after creation."""

    id: int
    source: str  # Free-text caption
    url: str  # Resolved media location

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        try:
            return cls(
                id=int(data["id"]),
                source=str(data.get("source") or ""),
                url=str(data.get("url") or ""),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PayloadError(f"Invalid attachment entry: {data!r}") from e

    def to_dict(self) -> dict:
        return {"id": self.id, "source": self.source, "url": self.url}


@dataclass(frozen=True)
class Word:
    """A dictionary entry.

    Every word carries the id of the category that owns it, so moving or
    deleting a word never requires searching the category buckets.
    """

    id: int
    word: str
    meaning: str
    category_id: int
    translation: str | None = None
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)

    @property
    def bucket_key(self) -> str:
        """Key of the words-by-category bucket holding this word."""
        return str(self.category_id)

    @classmethod
    def from_dict(cls, data: dict, category_id: int | str | None = None) -> "Word":
        """Build a word from its API/storage representation.

        Args:
            data: Word mapping as returned by the API or read from storage
            category_id: Owning category, used when the mapping does not
                carry one (the list endpoint keys words by category instead)

        Raises:
            PayloadError: If required fields are missing or mistyped
        """
        try:
            owner = data.get("category_id")
            if owner is None:
                owner = category_id
            if owner is None:
                raise KeyError("category_id")

            # The create endpoint calls the headword "name"
            headword = data["word"] if "word" in data else data["name"]
            translation = data.get("translation")

            return cls(
                id=int(data["id"]),
                word=str(headword),
                meaning=str(data.get("meaning") or ""),
                category_id=int(owner),
                translation=str(translation) if translation else None,
                attachments=tuple(
                    Attachment.from_dict(item) for item in data.get("attachments") or []
                ),
            )
        except PayloadError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PayloadError(f"Invalid word entry: {data!r}") from e

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "word": self.word,
            "meaning": self.meaning,
            "translation": self.translation,
            "category_id": self.category_id,
            "attachments": [attachment.to_dict() for attachment in self.attachments],
        }

    def matches(self, query: str) -> bool:
        """Check if the headword or meaning contains the query (case-insensitive)."""
        needle = query.lower()
        return needle in self.word.lower() or needle in self.meaning.lower()

    def __str__(self) -> str:
        return f"{self.word}: {self.meaning[:50]}"
