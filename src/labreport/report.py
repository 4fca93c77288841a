"""Report request builder: assemble the multimodal request and run it."""

import logging
from dataclasses import dataclass
from typing import Optional

from labreport.config import DEFAULT_TEMPERATURE, Config, Provider
from labreport.errors import EmptyResultError, GenerationError
from labreport.files import DEFAULT_IMAGE_MIME_TYPE, PDF_MIME_TYPE, FileKind
from labreport.parts import BlobPart, Part, TextPart
from labreport.postprocessing import strip_code_fences
from labreport.prompt import SYSTEM_INSTRUCTION, build_instruction
from labreport.providers.anthropic import AnthropicProvider
from labreport.providers.base import BaseProvider
from labreport.providers.gemini import GeminiProvider
from labreport.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate report. Please check your API key and file formats."
EMPTY_RESULT_MESSAGE = "No response generated."


@dataclass(frozen=True)
class GenerationResult:
    latex: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.latex is not None


def build_parts(config) -> list[Part]:
    """Lay out the request: guide, every data image in order, then the instructions.

    *config* is a :class:`labreport.wizard.ReportConfig`.
    """
    guide = config.guide
    parts: list[Part] = []

    if guide is not None and guide.kind == FileKind.PDF:
        parts.append(BlobPart(mime_type=PDF_MIME_TYPE, data=guide.content, name=guide.name))
    else:
        parts.append(TextPart(f"Experiment Guide Content:\n{guide.content if guide else ''}"))

    for image in config.images:
        parts.append(BlobPart(
            mime_type=image.mime_type or DEFAULT_IMAGE_MIME_TYPE,
            data=image.content,
            name=image.name,
        ))

    parts.append(TextPart(build_instruction(
        template=config.template,
        guide_name=guide.name if guide else None,
        image_names=[image.name for image in config.images],
    )))
    return parts


async def generate_report(
    config, provider: BaseProvider, temperature: float = DEFAULT_TEMPERATURE
) -> str:
    """Send *config* to *provider* and return the LaTeX source.

    A single attempt is made.

    Raises:
        GenerationError:  the provider call failed for any reason.
        EmptyResultError: the provider answered with no usable text.
    """
    parts = build_parts(config)
    logger.info(
        "Requesting report: %d part(s), %d image(s), temperature %.2f",
        len(parts), len(config.images), temperature,
    )
    try:
        text = await provider.complete(
            parts, system_instruction=SYSTEM_INSTRUCTION, temperature=temperature
        )
    except Exception as e:
        logger.error("Report generation failed: %s", e)
        raise GenerationError(GENERATION_FAILED_MESSAGE) from e

    latex = strip_code_fences(text or "")
    if not latex:
        raise EmptyResultError(EMPTY_RESULT_MESSAGE)
    return latex


def build_provider(config: Config) -> BaseProvider:
    if config.provider == Provider.GEMINI:
        return GeminiProvider(api_key=config.api_key, model=config.model)
    elif config.provider == Provider.ANTHROPIC:
        return AnthropicProvider(api_key=config.api_key, model=config.model)
    elif config.provider == Provider.OPENAI:
        return OpenAIProvider(api_key=config.api_key, model=config.model)
    else:
        raise ValueError(f"Unknown provider: {config.provider}")
