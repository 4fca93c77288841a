"""Google Gemini provider."""

import base64
from typing import Any, Sequence

from google import genai
from google.genai import types

from labreport.parts import BlobPart, Part
from labreport.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    def __init__(self, api_key: str, model: str) -> None:
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def complete(
        self, parts: Sequence[Part], system_instruction: str, temperature: float
    ) -> str:
        contents: list[Any] = []
        for part in parts:
            if isinstance(part, BlobPart):
                contents.append(types.Part.from_bytes(
                    data=base64.standard_b64decode(part.data),
                    mime_type=part.mime_type,
                ))
            else:
                contents.append(types.Part.from_text(text=part.text))

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=temperature,
            ),
        )

        return response.text or ""
