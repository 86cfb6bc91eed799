"""Image description service using vision-capable LLMs."""

from dataclasses import dataclass
from typing import Protocol

DESCRIPTION_PROMPT = "What's in this image?"


class DescriptionClient(Protocol):
    """Interface for LLM image description."""

    async def describe(self, *, model: str, image_url: str, prompt: str) -> str:
        """Return a natural-language description of the image."""


@dataclass
class DescriptionService:
    """Service that sends image URLs to the configured model."""

    client: DescriptionClient
    default_model: str

    async def describe(self, image_url: str, model: str | None = None) -> str:
        """Describe the image at the given URL."""
        resolved_model = (model or "").strip() or self.default_model
        return await self.client.describe(
            model=resolved_model,
            image_url=image_url,
            prompt=DESCRIPTION_PROMPT,
        )
