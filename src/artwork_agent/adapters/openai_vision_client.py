"""OpenAI Chat Completions client for artwork identification."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from artwork_agent.services.identification import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Chat Completions."""

    client: AsyncOpenAI | None

    @classmethod
    def create(
        cls, api_key: str | None, timeout: float = 30.0
    ) -> "OpenAIVisionClient":
        """Create a client; a missing key is reported on first use."""
        if not api_key:
            return cls(client=None)
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
    ) -> str:
        """Send one image and return the model's text answer."""
        if self.client is None:
            raise RuntimeError("Missing OpenAI API key (OPENAI_API_KEY)")
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": image_data_url, "detail": "high"},
                        },
                    ],
                },
            ],
            max_tokens=max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
