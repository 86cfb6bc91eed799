"""OpenAI chat completions client for image descriptions."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from image_describer.services.descriptions import DescriptionClient


@dataclass
class OpenAIDescriptionClient(DescriptionClient):
    """Description client backed by OpenAI chat completions."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIDescriptionClient":
        """Create an OpenAI description client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def describe(self, *, model: str, image_url: str, prompt: str) -> str:
        """Ask the model to describe the image and return the first choice."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
        )
        if not response.choices:
            raise RuntimeError("OpenAI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("OpenAI returned an empty response")
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
