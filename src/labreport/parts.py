"""Provider-neutral pieces of a multimodal request."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class BlobPart:
    """An inline binary attachment. *data* is base64 without a data-URL prefix."""

    mime_type: str
    data: str
    name: str = ""

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"


Part = Union[TextPart, BlobPart]
