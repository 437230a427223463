"""
app/validation/file_category_validator.py

Decides whether one uploaded file is admissible for one upload category.

Checks run in a fixed order and stop at the first failure, so a caller
always sees the single most fundamental problem:

    category exists
      └─ extension / declared MIME type allowed
           └─ magic bytes agree with the claimed type
                └─ size within the category limit
                     └─ pixel dimensions (categories with a minimum only)

A rejection is a normal return value (ValidationOutcome), never an
exception. Only an OS-level failure to read the file raises
UploadReadError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from app.core.constants import MAGIC_BYTES_LENGTH, MIME_TYPES_BY_EXTENSION
from app.core.exceptions import UploadReadError
from app.core.logger import get_logger
from app.validation import signatures
from app.validation.category_rules import CategoryRule, get_rule
from app.validation.image_probe import read_image_dimensions
from app.validation.uploaded_file import UploadedFile

logger = get_logger(__name__)

_KNOWN_MIME_TYPES = frozenset(m for mimes in MIME_TYPES_BY_EXTENSION.values() for m in mimes)


@dataclass(frozen=True)
class ValidationOutcome:
    """Pass/fail plus the message shown to the user on rejection."""

    valid: bool
    message: Optional[str] = None

    @classmethod
    def passed(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def failed(cls, message: str) -> "ValidationOutcome":
        return cls(valid=False, message=message)

    def __bool__(self) -> bool:
        return self.valid


def _format_mb(max_size_mb: float) -> str:
    # 5.0 -> "5", 2.5 -> "2.5"
    return f"{max_size_mb:g}"


def _mime_allows(mime_type: str, extension: str) -> bool:
    return mime_type in MIME_TYPES_BY_EXTENSION.get(extension, ())


class FileCategoryValidator:
    """
    Validates uploads against the category rule table.

    Stateless: one instance is safe to share across threads and requests.
    The image probe is injectable so tests can simulate decoder failures.
    """

    def __init__(
        self,
        dimension_reader: Callable[[str], Optional[Tuple[int, int]]] | None = None,
    ) -> None:
        self._read_dimensions = dimension_reader or read_image_dimensions

    # ── Public API ─────────────────────────────────────────────────────────────

    def validate(self, category: str, file: Optional[UploadedFile]) -> ValidationOutcome:
        """
        Validate ``file`` for ``category``.

        Args:
            category : Category key, e.g. "customer-photo".
            file     : The spooled upload.

        Returns:
            ValidationOutcome: valid, or invalid with exactly one message.

        Raises:
            UploadReadError: If the file content cannot be opened or read.
        """
        if file is None:
            return self._reject(category, "The file must be a valid uploaded file.")

        rule = get_rule(category)
        if rule is None:
            return self._reject(category, f"Invalid file category: {category}")

        if not self._type_allowed(rule, file):
            allowed = ", ".join(rule.extensions)
            return self._reject(category, f"File type not allowed. Allowed types: {allowed}")

        if not self._content_matches(rule, file):
            return self._reject(category, "File type does not match file content.")

        if file.size > rule.max_size:
            return self._reject(
                category, f"File must be less than {_format_mb(rule.max_size_mb)}MB"
            )

        if rule.min_dimensions is not None:
            dimensions = self._read_dimensions(file.path)
            if dimensions is None:
                return self._reject(category, "Unable to read image dimensions.")

            min_width, min_height = rule.min_dimensions
            width, height = dimensions
            if width < min_width or height < min_height:
                return self._reject(
                    category, f"Image must be at least {min_width}x{min_height} pixels"
                )

        logger.debug("'%s' accepted as %s.", file.original_name, category)
        return ValidationOutcome.passed()

    # ── Internals ──────────────────────────────────────────────────────────────

    @staticmethod
    def _type_allowed(rule: CategoryRule, file: UploadedFile) -> bool:
        if file.extension in rule.extensions:
            return True
        mime_type = file.normalized_mime_type
        return any(_mime_allows(mime_type, ext) for ext in rule.extensions)

    def _content_matches(self, rule: CategoryRule, file: UploadedFile) -> bool:
        """
        Sniff the leading bytes and require them to agree with the claim.

        The content must carry the signature of at least one allowed
        extension. If the claimed extension is itself allowed, the content
        must be of that type; if the declared MIME type is one we know, the
        content must be of a type that MIME type stands for.
        """
        head = self._read_head(file)
        detected = signatures.sniff(head, rule.extensions)
        if not detected:
            return False

        if file.extension in rule.extensions and file.extension not in detected:
            return False

        mime_type = file.normalized_mime_type
        if mime_type in _KNOWN_MIME_TYPES:
            return any(_mime_allows(mime_type, ext) for ext in detected)

        return True

    @staticmethod
    def _read_head(file: UploadedFile) -> bytes:
        try:
            with file.open() as fh:
                return fh.read(MAGIC_BYTES_LENGTH)
        except OSError as exc:
            raise UploadReadError(
                f"Could not read '{file.original_name}': {exc}"
            ) from exc

    @staticmethod
    def _reject(category: str, message: str) -> ValidationOutcome:
        logger.info("Upload rejected for category '%s': %s", category, message)
        return ValidationOutcome.failed(message)


# ── Module-level singleton ─────────────────────────────────────────────────────

file_category_validator = FileCategoryValidator()


def validate(category: str, file: Optional[UploadedFile]) -> ValidationOutcome:
    """Validate ``file`` for ``category`` with the shared validator."""
    return file_category_validator.validate(category, file)
