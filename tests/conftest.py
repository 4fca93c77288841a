"""Shared fixtures for the test suite.

All fixtures here produce real files / real bytes so tests exercise actual
code paths rather than hand-crafted stubs.  The only stand-in is
:class:`FakeProvider`, which replaces the network call to the model.
"""

import io
from pathlib import Path
from typing import Sequence

import fitz  # PyMuPDF
import pytest
from click.testing import CliRunner
from PIL import Image

from labreport.files import FileSource
from labreport.parts import Part
from labreport.providers.base import BaseProvider

TEMPLATE_TEXT = "\\documentclass{article}\n\\begin{document}\n\\section{Results}\n\\end{document}\n"


class FakeProvider(BaseProvider):
    """Records every request and answers with a canned reply (or raises)."""

    def __init__(self, reply: str = "\\documentclass{article}", error: Exception = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def complete(
        self, parts: Sequence[Part], system_instruction: str, temperature: float
    ) -> str:
        self.calls.append({
            "parts": list(parts),
            "system_instruction": system_instruction,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return self.reply


def failing_source(name: str = "broken.jpg") -> FileSource:
    """A picked file whose read fails like an unreadable disk file."""

    def read() -> bytes:
        raise OSError("permission denied")

    return FileSource(name=name, mime_type="image/jpeg", read=read)


# ── CLI runner ─────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ── Image fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def png_bytes() -> bytes:
    """A real, valid 10×10 red PNG image as raw bytes."""
    buf = io.BytesIO()
    Image.new("RGB", (10, 10), color=(255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A real 12×8 grey JPEG, standing in for a phone photo of a data sheet."""
    buf = io.BytesIO()
    Image.new("RGB", (12, 8), color=(200, 200, 200)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def oversized_png_bytes(monkeypatch) -> bytes:
    """A 100×100 PNG that Pillow refuses to open as a decompression bomb.

    The pixel limit is lowered for the test so the image stays tiny on disk;
    the 12×8 ``jpeg_bytes`` photo is still well under it.
    """
    buf = io.BytesIO()
    Image.new("RGB", (100, 100), color=(255, 255, 255)).save(buf, format="PNG")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    return buf.getvalue()


@pytest.fixture
def png_file(tmp_path: Path, png_bytes: bytes) -> Path:
    path = tmp_path / "data.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def image_files(tmp_path: Path, jpeg_bytes: bytes) -> list[Path]:
    """Two photos of consecutive data pages."""
    paths = []
    for name in ("img1.jpg", "img2.jpg"):
        path = tmp_path / name
        path.write_bytes(jpeg_bytes)
        paths.append(path)
    return paths


# ── Template / guide fixtures ──────────────────────────────────────────────


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    path = tmp_path / "template.tex"
    path.write_text(TEMPLATE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def text_guide_file(tmp_path: Path) -> Path:
    path = tmp_path / "guide.txt"
    path.write_text("Measure the period of the pendulum ten times.", encoding="utf-8")
    return path


@pytest.fixture
def pdf_bytes() -> bytes:
    """A real 2-page PDF with distinct text on each page."""
    doc = fitz.open()
    for i in range(2):
        page = doc.new_page(width=595, height=842)  # A4
        page.insert_text((72, 100), f"Guide page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_guide_file(tmp_path: Path, pdf_bytes: bytes) -> Path:
    path = tmp_path / "guide.pdf"
    path.write_bytes(pdf_bytes)
    return path
