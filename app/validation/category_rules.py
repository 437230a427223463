"""
app/validation/category_rules.py

The fixed table of upload categories and the constraints each one imposes.

The table is compiled in and exposed read-only; it is part of the API
contract shared with the dashboard, not deployment configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from app.core.constants import BYTES_PER_MB


@dataclass(frozen=True)
class CategoryRule:
    """
    Constraints for one upload category.

    Attributes:
        name           : Category key, e.g. "customer-photo".
        extensions     : Allowed extensions, in display order.
        max_size       : Largest accepted size in bytes (inclusive).
        min_dimensions : Optional (width, height) lower bound in pixels.
    """

    name: str
    extensions: Tuple[str, ...]
    max_size: int
    min_dimensions: Optional[Tuple[int, int]] = None

    @property
    def max_size_mb(self) -> float:
        return self.max_size / BYTES_PER_MB


def _rule(
    name: str,
    extensions: Tuple[str, ...],
    max_mb: int,
    min_dimensions: Optional[Tuple[int, int]] = None,
) -> Tuple[str, CategoryRule]:
    return name, CategoryRule(name, extensions, max_mb * BYTES_PER_MB, min_dimensions)


_IMAGES = ("jpeg", "jpg", "png", "webp")
_DOCUMENTS = ("jpeg", "jpg", "png", "pdf")

CATEGORY_RULES: Mapping[str, CategoryRule] = MappingProxyType(dict([
    _rule("customer-photo", _IMAGES, 5, min_dimensions=(200, 200)),
    _rule("dive-certificate", _DOCUMENTS, 10),
    _rule("insurance-card", _DOCUMENTS, 5),
    _rule("equipment-photo", _IMAGES, 10),
    _rule("dive-site-map", _DOCUMENTS, 15),
    _rule("service-receipt", _DOCUMENTS, 5),
    _rule("invoice", ("pdf", "jpeg", "jpg", "png"), 5),
]))


def get_rule(category: Optional[str]) -> Optional[CategoryRule]:
    """Return the rule for ``category`` or None when it is not a known category."""
    if not category:
        return None
    return CATEGORY_RULES.get(category)
