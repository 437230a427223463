"""
app/validation/signatures.py

Magic-byte signatures for the formats the service accepts.

Content sniffing is authoritative: a PHP script renamed to photo.jpg and
sent as image/jpeg still starts with "<?php", and is rejected here.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from app.core.constants import MAGIC_BYTES_LENGTH

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PDF_SIGNATURE = b"%PDF"


def _is_jpeg(head: bytes) -> bool:
    return head.startswith(JPEG_SIGNATURE)


def _is_png(head: bytes) -> bool:
    return head.startswith(PNG_SIGNATURE)


def _is_webp(head: bytes) -> bool:
    # RIFF container with the WEBP form type (normally at offset 8).
    return head.startswith(b"RIFF") and b"WEBP" in head[:MAGIC_BYTES_LENGTH]


def _is_pdf(head: bytes) -> bool:
    return head.startswith(PDF_SIGNATURE)


_MATCHERS: Dict[str, Callable[[bytes], bool]] = {
    "jpeg": _is_jpeg,
    "jpg": _is_jpeg,
    "png": _is_png,
    "webp": _is_webp,
    "pdf": _is_pdf,
}


def matches(extension: str, head: bytes) -> bool:
    """True if ``head`` carries the signature of ``extension``; unknown extensions never match."""
    matcher = _MATCHERS.get(extension)
    return bool(matcher and matcher(head))


def sniff(head: bytes, candidates: Iterable[str]) -> List[str]:
    """Return the candidate extensions whose signature ``head`` matches, in candidate order."""
    return [ext for ext in candidates if matches(ext, head)]
