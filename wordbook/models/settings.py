"""Data model for user preferences."""

from dataclasses import dataclass

from wordbook.exceptions import PayloadError, ValidationError

MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 5

# Multiplier applied to base font sizes for each level
FONT_SCALE_FACTORS = {
    1: 0.8,  # Small
    2: 0.9,  # Medium-small
    3: 1.0,  # Medium (default)
    4: 1.1,  # Medium-large
    5: 1.2,  # Large
}


@dataclass(frozen=True)
class Settings:
    """Per-installation display preferences."""

    dark_mode: bool = True
    font_size: int = 3

    def __post_init__(self):
        if not isinstance(self.dark_mode, bool):
            raise ValidationError(f"dark_mode must be a bool, got {self.dark_mode!r}")
        # bool is an int subclass; reject it explicitly
        if isinstance(self.font_size, bool) or not isinstance(self.font_size, int):
            raise ValidationError(f"font_size must be an int, got {self.font_size!r}")
        if not MIN_FONT_SIZE <= self.font_size <= MAX_FONT_SIZE:
            raise ValidationError(
                f"font_size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}, "
                f"got {self.font_size}"
            )

    @property
    def font_scale(self) -> float:
        """Scale factor for the configured font size level."""
        return FONT_SCALE_FACTORS[self.font_size]

    def scaled(self, base_size: float) -> float:
        """Scale a base font size by the user's preference."""
        return base_size * self.font_scale

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from the persisted blob.

        Missing keys fall back to their defaults.

        Raises:
            PayloadError: If the blob is not a mapping or holds invalid values
        """
        if not isinstance(data, dict):
            raise PayloadError(f"Settings blob must be an object, got {type(data).__name__}")
        defaults = cls()
        try:
            return cls(
                dark_mode=data.get("darkMode", defaults.dark_mode),
                font_size=data.get("fontSize", defaults.font_size),
            )
        except ValidationError as e:
            raise PayloadError(f"Invalid settings blob: {e}") from e

    def to_dict(self) -> dict:
        return {"darkMode": self.dark_mode, "fontSize": self.font_size}
