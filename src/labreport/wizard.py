"""Headless wizard session: Template → Guide → Data → Generate.

The session holds everything one user has entered so far.  Both the browser
surface and the one-shot CLI drive the same object, so the step rules live
here and nowhere else.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from labreport.config import DEFAULT_TEMPERATURE
from labreport.errors import GenerationError, ReadError
from labreport.files import FileKind, FileSource, UploadedFile, guide_kind, ingest, ingest_each
from labreport.pdf import guide_page_count
from labreport.providers.base import BaseProvider
from labreport.report import GenerationResult, generate_report

logger = logging.getLogger(__name__)


class WizardStep(Enum):
    TEMPLATE = "template"
    GUIDE = "guide"
    DATA = "data"
    GENERATE = "generate"

    @property
    def position(self) -> int:
        return _STEP_ORDER.index(self)

    def __lt__(self, other: "WizardStep") -> bool:
        if not isinstance(other, WizardStep):
            return NotImplemented
        return self.position < other.position

    def __le__(self, other: "WizardStep") -> bool:
        if not isinstance(other, WizardStep):
            return NotImplemented
        return self.position <= other.position

    def __gt__(self, other: "WizardStep") -> bool:
        if not isinstance(other, WizardStep):
            return NotImplemented
        return self.position > other.position

    def __ge__(self, other: "WizardStep") -> bool:
        if not isinstance(other, WizardStep):
            return NotImplemented
        return self.position >= other.position

    def next(self) -> Optional["WizardStep"]:
        i = self.position + 1
        return _STEP_ORDER[i] if i < len(_STEP_ORDER) else None

    def previous(self) -> Optional["WizardStep"]:
        i = self.position - 1
        return _STEP_ORDER[i] if i >= 0 else None


_STEP_ORDER = (WizardStep.TEMPLATE, WizardStep.GUIDE, WizardStep.DATA, WizardStep.GENERATE)


@dataclass
class ReportConfig:
    template: str = ""
    guide: Optional[UploadedFile] = None
    images: list[UploadedFile] = field(default_factory=list)


@dataclass(frozen=True)
class Review:
    """What will be sent, shown on the Generate step."""

    has_template: bool
    template_name: Optional[str]
    guide_name: Optional[str]
    guide_pages: Optional[int]
    image_count: int


class WizardSession:
    def __init__(self) -> None:
        self.step = WizardStep.TEMPLATE
        self.config = ReportConfig()
        self.template_name: Optional[str] = None
        self.result: Optional[GenerationResult] = None
        self.error: Optional[str] = None
        self.busy = False

    # ── Navigation ────────────────────────────────────────────────────────

    def can_advance(self) -> bool:
        if self.step == WizardStep.TEMPLATE:
            return bool(self.config.template)
        if self.step == WizardStep.GUIDE:
            return self.config.guide is not None
        # Data photos are optional; Generate is the last step.
        return self.step == WizardStep.DATA

    def advance(self) -> bool:
        if not self.can_advance():
            return False
        self.step = self.step.next()
        return True

    def retreat(self) -> bool:
        previous = self.step.previous()
        if previous is None:
            return False
        self.step = previous
        return True

    def jump_to(self, step: WizardStep) -> bool:
        """Return to an already completed step. Forward jumps are refused."""
        if not step < self.step:
            return False
        self.step = step
        return True

    def is_completed(self, step: WizardStep) -> bool:
        return step < self.step

    # ── Ingestion ─────────────────────────────────────────────────────────

    async def load_template(self, source: FileSource) -> bool:
        try:
            uploaded = await ingest(source, FileKind.TEXT)
        except ReadError as e:
            logger.error("%s", e)
            self.error = "Failed to read template file."
            return False
        self.config.template = uploaded.content
        self.template_name = uploaded.name
        return True

    async def load_guide(self, source: FileSource) -> bool:
        try:
            uploaded = await ingest(source, guide_kind(source.mime_type))
        except ReadError as e:
            logger.error("%s", e)
            self.error = "Failed to read guide file."
            return False
        self.config.guide = uploaded
        return True

    async def add_images(self, sources: Iterable[FileSource], preprocess: bool = False) -> int:
        """Append every readable photo in *sources*; unreadable ones are skipped.

        Returns the number of photos appended.
        """
        outcomes = await ingest_each(sources, FileKind.IMAGE, preprocess=preprocess)
        added = [outcome.file for outcome in outcomes if outcome.ok]
        self.config.images = self.config.images + added
        return len(added)

    def remove_image(self, index: int) -> UploadedFile:
        images = self.config.images
        if not 0 <= index < len(images):
            raise IndexError(f"No image at position {index}")
        removed = images[index]
        self.config.images = [image for i, image in enumerate(images) if i != index]
        return removed

    # ── Generation ────────────────────────────────────────────────────────

    def review(self) -> Review:
        guide = self.config.guide
        pages = None
        if guide is not None and guide.kind == FileKind.PDF:
            pages = guide_page_count(guide.content)
        return Review(
            has_template=bool(self.config.template),
            template_name=self.template_name,
            guide_name=guide.name if guide else None,
            guide_pages=pages,
            image_count=len(self.config.images),
        )

    async def generate(
        self, provider: BaseProvider, temperature: float = DEFAULT_TEMPERATURE
    ) -> GenerationResult:
        self.error = None
        self.busy = True
        try:
            latex = await generate_report(self.config, provider, temperature=temperature)
        except GenerationError as e:
            self.error = str(e)
            self.result = GenerationResult(error=self.error)
        else:
            self.result = GenerationResult(latex=latex)
        finally:
            self.busy = False
        return self.result

    def dismiss_error(self) -> None:
        self.error = None
