"""Abstract base for LLM report providers."""

from abc import ABC, abstractmethod
from typing import Sequence

from labreport.parts import Part


class BaseProvider(ABC):
    @abstractmethod
    async def complete(
        self, parts: Sequence[Part], system_instruction: str, temperature: float
    ) -> str:
        """Send the ordered *parts* as one user turn and return the generated text."""
        ...
