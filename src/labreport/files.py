"""File ingestion: turn user-selected files into uploadable payloads.

Text files (the LaTeX template, a plain-text guide) are kept as decoded
strings.  Binary files (data photos, a PDF guide) are base64-encoded and
carry their mime type, which is what every provider's inline-attachment
format expects.
"""

import asyncio
import base64
import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from PIL import Image, UnidentifiedImageError

from labreport.errors import ReadError
from labreport.preprocessing import preprocess_for_ocr

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


class FileKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    PDF = "pdf"


_FALLBACK_MIME_TYPES = {
    FileKind.IMAGE: DEFAULT_IMAGE_MIME_TYPE,
    FileKind.PDF: PDF_MIME_TYPE,
}


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: str
    kind: FileKind
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == FileKind.TEXT and self.mime_type is not None:
            raise ValueError(f"{self.name}: text files carry no mime type")
        if self.kind != FileKind.TEXT and not self.mime_type:
            raise ValueError(f"{self.name}: {self.kind.value} files need a mime type")


@dataclass(frozen=True)
class FileSource:
    """A file picked by the user: a name, a declared mime type and its bytes."""

    name: str
    mime_type: str
    read: Callable[[], bytes]

    @classmethod
    def from_path(cls, path: Path) -> "FileSource":
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, mime_type=mime_type or "", read=path.read_bytes)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: str = "") -> "FileSource":
        return cls(name=name, mime_type=mime_type or "", read=lambda: data)


@dataclass(frozen=True)
class IngestOutcome:
    source: FileSource
    file: Optional[UploadedFile] = None
    error: Optional[ReadError] = None

    @property
    def ok(self) -> bool:
        return self.file is not None


def guide_kind(mime_type: str) -> FileKind:
    """A guide is sent as a PDF attachment only if it is declared as one."""
    return FileKind.PDF if mime_type == PDF_MIME_TYPE else FileKind.TEXT


async def ingest(source: FileSource, kind: FileKind, preprocess: bool = False) -> UploadedFile:
    """Read *source* and wrap it as an :class:`UploadedFile` of the given kind.

    Args:
        source:     The picked file.
        kind:       How to encode it.  TEXT is decoded as UTF-8; IMAGE and PDF
                    are base64-encoded and keep the declared mime type.
        preprocess: Run the photo clean-up pipeline on IMAGE files.  The
                    result is always PNG.

    Raises:
        ReadError: the bytes could not be read, decoded or (when
                   preprocessing) opened as an image, including photos
                   over Pillow's decompression-bomb limit.
    """
    try:
        data = await asyncio.to_thread(source.read)
    except OSError as e:
        raise ReadError(source.name, str(e)) from e

    if kind == FileKind.TEXT:
        try:
            content = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ReadError(source.name, "not valid UTF-8 text") from e
        return UploadedFile(name=source.name, content=content, kind=kind)

    mime_type = source.mime_type or _FALLBACK_MIME_TYPES[kind]
    if kind == FileKind.IMAGE and preprocess:
        try:
            data = await asyncio.to_thread(preprocess_for_ocr, data)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ReadError(source.name, "not a readable image") from e
        mime_type = "image/png"

    content = base64.standard_b64encode(data).decode("ascii")
    return UploadedFile(name=source.name, content=content, kind=kind, mime_type=mime_type)


async def ingest_each(
    sources: Iterable[FileSource], kind: FileKind, preprocess: bool = False
) -> list[IngestOutcome]:
    """Ingest *sources* one at a time, recording a result for every file.

    A file that fails to read does not stop the rest of the batch.
    """
    outcomes = []
    for source in sources:
        try:
            uploaded = await ingest(source, kind, preprocess=preprocess)
        except ReadError as e:
            logger.warning("Skipped %s: %s", source.name, e.reason)
            outcomes.append(IngestOutcome(source=source, error=e))
        else:
            outcomes.append(IngestOutcome(source=source, file=uploaded))
    return outcomes
