"""OpenAI GPT-4o provider."""

from typing import Any, Sequence

from openai import AsyncOpenAI

from labreport.parts import BlobPart, Part
from labreport.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    def __init__(self, api_key: str, model: str) -> None:
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def complete(
        self, parts: Sequence[Part], system_instruction: str, temperature: float
    ) -> str:
        content: list[Any] = []

        for part in parts:
            if isinstance(part, BlobPart):
                data_url = f"data:{part.mime_type};base64,{part.data}"
                if part.is_pdf:
                    content.append({
                        "type": "file",
                        "file": {"filename": part.name or "guide.pdf", "file_data": data_url},
                    })
                else:
                    content.append({
                        "type": "image_url",
                        "image_url": {"url": data_url, "detail": "high"},
                    })
            else:
                content.append({"type": "text", "text": part.text})

        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=8192,
            temperature=temperature,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": content},
            ],
        )

        return response.choices[0].message.content or ""
