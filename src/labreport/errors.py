"""Exception types raised by the ingestion pipeline and the report builder."""


class LabReportError(Exception):
    """Base class for all labreport errors."""


class ReadError(LabReportError):
    """A local file could not be read or decoded."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Could not read {name}: {reason}")
        self.name = name
        self.reason = reason


class GenerationError(LabReportError):
    """The AI service call failed. Terminal for the current attempt."""


class EmptyResultError(GenerationError):
    """The AI service answered but produced no usable text."""
