"""Anthropic Claude provider."""

from typing import Any, Sequence

import anthropic

from labreport.parts import BlobPart, Part
from labreport.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    def __init__(self, api_key: str, model: str) -> None:
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    async def complete(
        self, parts: Sequence[Part], system_instruction: str, temperature: float
    ) -> str:
        content: list[Any] = []

        for part in parts:
            if isinstance(part, BlobPart):
                content.append({
                    "type": "document" if part.is_pdf else "image",
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": part.data,
                    },
                })
            else:
                content.append({"type": "text", "text": part.text})

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=8192,
            temperature=temperature,
            system=system_instruction,
            messages=[{"role": "user", "content": content}],
        )

        if not response.content:
            return ""
        return response.content[0].text or ""
