"""app/validation/__init__.py — public API of the validation package."""

from app.validation.category_rules import CATEGORY_RULES, CategoryRule, get_rule
from app.validation.file_category_validator import (
    FileCategoryValidator,
    ValidationOutcome,
    file_category_validator,
    validate,
)
from app.validation.uploaded_file import UploadedFile

__all__ = [
    "CATEGORY_RULES",
    "CategoryRule",
    "FileCategoryValidator",
    "UploadedFile",
    "ValidationOutcome",
    "file_category_validator",
    "get_rule",
    "validate",
]
