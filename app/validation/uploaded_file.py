"""
app/validation/uploaded_file.py

Transient description of one uploaded file.

The HTTP layer spools the multipart body to disk before validation runs,
so an UploadedFile always points at a complete file on the local
filesystem. It lives only for the duration of one request.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional


@dataclass
class UploadedFile:
    """
    Attributes:
        original_name : Filename as sent by the client (e.g. "photo.JPG").
        mime_type     : Client-declared content type; may be empty.
        size          : Size of the content in bytes.
        path          : Local path of the spooled content.
    """

    original_name: str
    mime_type: Optional[str]
    size: int
    path: str

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        original_name: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> "UploadedFile":
        """Describe a file already on disk; size is taken from the filesystem."""
        p = Path(path)
        return cls(
            original_name=original_name if original_name is not None else p.name,
            mime_type=mime_type,
            size=p.stat().st_size,
            path=str(p),
        )

    @property
    def extension(self) -> str:
        """Lowercased claimed extension without the leading dot ('' if none)."""
        return Path(self.original_name or "").suffix.lstrip(".").lower()

    @property
    def normalized_mime_type(self) -> str:
        """Declared MIME type without parameters, lowercased."""
        return (self.mime_type or "").split(";", 1)[0].strip().lower()

    def open(self) -> BinaryIO:
        """Open the content for binary reading. Raises OSError on failure."""
        return open(self.path, "rb")
