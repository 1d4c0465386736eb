"""Data model for vocabulary categories."""

from dataclasses import dataclass

from wordbook.exceptions import PayloadError


@dataclass(frozen=True)
class Category:
    """A flat, admin-editable grouping of words."""

    id: int
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        """Build a category from its API/storage representation.

        Raises:
            PayloadError: If required fields are missing or mistyped
        """
        try:
            return cls(id=int(data["id"]), name=str(data["name"]))
        except (KeyError, TypeError, ValueError) as e:
            raise PayloadError(f"Invalid category entry: {data!r}") from e

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
