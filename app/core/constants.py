"""
app/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

from typing import Dict, Tuple

# ── Sizes ──────────────────────────────────────────────────────────────────────

BYTES_PER_MB: int = 1024 * 1024

#: Number of leading bytes inspected when sniffing a file's real format.
MAGIC_BYTES_LENGTH: int = 12

# ── File types ─────────────────────────────────────────────────────────────────

#: Client-declared MIME types that are accepted as standing in for an extension.
MIME_TYPES_BY_EXTENSION: Dict[str, Tuple[str, ...]] = {
    "jpeg": ("image/jpeg",),
    "jpg": ("image/jpeg",),
    "png": ("image/png",),
    "webp": ("image/webp",),
    "pdf": ("application/pdf",),
}

# ── Upload targets ─────────────────────────────────────────────────────────────

#: Business records a file may be attached to.
ALLOWED_ENTITY_TYPES: Tuple[str, ...] = (
    "customer",
    "equipment",
    "dive_site",
    "invoice",
    "equipment_item",
)

#: Prefix of every storage path produced by the upload service.
STORAGE_PATH_PREFIX: str = "uploads/tenants"
