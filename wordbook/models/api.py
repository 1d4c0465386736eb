"""Data models for REST API exchanges."""

import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass
class ApiResponse:
    """Outcome of a single REST call.

    Transport failures and non-2xx statuses are reported here rather than
    raised, so callers decide whether a failure matters.
    """

    success: bool
    data: Any = None
    error: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        if self.success:
            return f"ApiResponse(success, status={self.status_code})"
        return f"ApiResponse(failed, status={self.status_code}, error={self.error!r})"


@dataclass(frozen=True)
class UploadFile:
    """A file to send as part of a multipart request (word attachment, text cover)."""

    filename: str
    content: bytes
    content_type: str = "image/jpeg"

    @classmethod
    def from_path(cls, path: Path, content_type: str | None = None) -> "UploadFile":
        """Read a file from disk, guessing its content type from the name."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or guessed or "application/octet-stream",
        )

    @classmethod
    def from_data_uri(cls, uri: str, stem: str = "upload") -> "UploadFile":
        """Decode a base64 data URI (as produced by web image pickers).

        Raises:
            ValueError: If the URI is not a base64 data URI
        """
        match = _DATA_URI_RE.match(uri)
        if not match:
            raise ValueError("Not a base64 data URI")

        mime = match.group("mime")
        try:
            content = base64.b64decode(match.group("data"), validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload in data URI: {e}") from e

        ext = mime.split("/")[-1] or "jpg"
        return cls(filename=f"{stem}.{ext}", content=content, content_type=mime)

    def as_multipart(self) -> tuple[str, bytes, str]:
        """Tuple form accepted by ``requests`` for the ``files`` argument."""
        return (self.filename, self.content, self.content_type)
