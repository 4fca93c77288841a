"""PDF inspection using PyMuPDF."""

import base64
import logging
from typing import Optional

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


def pdf_page_count(data: bytes) -> int:
    """Return the number of pages in the PDF held in *data*.

    Raises ``fitz.FileDataError`` (a ``RuntimeError``) for bytes that are not a PDF.
    """
    with fitz.open(stream=data, filetype="pdf") as doc:
        return doc.page_count


def guide_page_count(content_b64: str) -> Optional[int]:
    """Page count of a base64-encoded PDF guide, or None if it cannot be parsed.

    Only used for the review summary; the guide is sent to the model as-is.
    """
    try:
        return pdf_page_count(base64.standard_b64decode(content_b64))
    except (RuntimeError, ValueError) as e:
        logger.warning("Could not count guide pages: %s", e)
        return None
