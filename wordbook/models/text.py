"""Data model for long-form texts."""

from dataclasses import dataclass

from wordbook.exceptions import PayloadError


@dataclass(frozen=True)
class Text:
    """A standalone reading text with an optional cover image."""

    id: int
    title: str
    subtitle: str
    content: str
    cover_url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Text":
        try:
            return cls(
                id=int(data["id"]),
                title=str(data["title"]),
                subtitle=str(data.get("subtitle") or ""),
                content=str(data.get("content") or ""),
                cover_url=str(data.get("cover_url") or ""),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PayloadError(f"Invalid text entry: {data!r}") from e

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "content": self.content,
            "cover_url": self.cover_url,
        }
