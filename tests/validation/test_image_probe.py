"""
tests/validation/test_image_probe.py

Tests for read_image_dimensions against images rendered with Pillow.
"""

from pathlib import Path

import pytest

from app.validation.image_probe import read_image_dimensions


class TestReadImageDimensions:

    @pytest.mark.parametrize("fmt", ["JPEG", "PNG", "WEBP"])
    def test_reads_width_and_height(self, fmt, tmp_path: Path, image_bytes) -> None:
        path = tmp_path / f"img.{fmt.lower()}"
        path.write_bytes(image_bytes(fmt, (320, 240)))

        assert read_image_dimensions(str(path)) == (320, 240)

    def test_non_image_returns_none(self, tmp_path: Path, pdf_bytes) -> None:
        path = tmp_path / "doc.pdf"
        path.write_bytes(pdf_bytes)

        assert read_image_dimensions(str(path)) is None

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert read_image_dimensions(str(tmp_path / "absent.jpg")) is None
