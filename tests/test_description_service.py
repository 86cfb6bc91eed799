"""Tests for the description service."""

import asyncio

from image_describer.services.descriptions import (
    DESCRIPTION_PROMPT,
    DescriptionService,
)
from tests.conftest import FakeDescriptionClient


def test_describe_honours_requested_model() -> None:
    client = FakeDescriptionClient()
    service = DescriptionService(client=client, default_model="gpt-4o")

    asyncio.run(service.describe("https://x/cat.png", model="gpt-4o-mini"))

    assert client.calls == [
        {
            "model": "gpt-4o-mini",
            "image_url": "https://x/cat.png",
            "prompt": DESCRIPTION_PROMPT,
        }
    ]


def test_describe_falls_back_to_default_model() -> None:
    client = FakeDescriptionClient()
    service = DescriptionService(client=client, default_model="gpt-4o")

    asyncio.run(service.describe("https://x/cat.png", model="  "))

    assert client.calls[0]["model"] == "gpt-4o"
