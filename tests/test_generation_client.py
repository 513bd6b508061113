"""Tests for the generation client error mapping and decoding."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
import pytest_mock
from PIL import Image

from tryon.api import AITunnelClient, AITunnelRequestError
from tryon.config.settings import TryOnSettings
from tryon.imggen import GENERIC_FAILURE_MESSAGE, GenerationClient, GenerationError


@pytest.fixture
def aitunnel(mocker: pytest_mock.MockerFixture):
    return mocker.AsyncMock()


@pytest.fixture
def client(aitunnel) -> GenerationClient:
    return GenerationClient(aitunnel, TryOnSettings(image_size="1024x1024", image_quality="medium"))


@pytest.mark.asyncio
async def test_generate_decodes_base64_payload(client: GenerationClient, aitunnel) -> None:
    aitunnel.edit_images.return_value = {"image_base64": base64.b64encode(b"png-bytes").decode(), "image_url": None}

    result = await client.generate(b"A", b"B")

    assert result == b"png-bytes"
    prompt, images = aitunnel.edit_images.await_args.args
    assert images == [("subject", b"A"), ("garment", b"B")]
    assert "subject.png" in prompt
    assert aitunnel.edit_images.await_args.kwargs["options"] == {"size": "1024x1024", "quality": "medium"}


@pytest.mark.asyncio
async def test_generate_downloads_url_payload(client: GenerationClient, aitunnel) -> None:
    aitunnel.edit_images.return_value = {"image_base64": None, "image_url": "https://cdn.test/out.png"}
    aitunnel.download.return_value = b"downloaded"

    result = await client.generate(b"A", b"B")

    assert result == b"downloaded"
    aitunnel.download.assert_awaited_once_with("https://cdn.test/out.png")


@pytest.mark.asyncio
async def test_generate_accepts_data_url(client: GenerationClient, aitunnel) -> None:
    encoded = base64.b64encode(b"inline").decode()
    aitunnel.edit_images.return_value = {"image_base64": None, "image_url": f"data:image/png;base64,{encoded}"}

    assert await client.generate(b"A", b"B") == b"inline"
    aitunnel.download.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [AITunnelRequestError("boom", status_code=500), ValueError("not an image")],
)
async def test_generate_maps_failures_to_generation_error(client: GenerationClient, aitunnel, error) -> None:
    aitunnel.edit_images.side_effect = error

    with pytest.raises(GenerationError) as exc_info:
        await client.generate(b"A", b"B")

    assert str(exc_info.value) == GENERIC_FAILURE_MESSAGE
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_generate_fails_on_empty_response(client: GenerationClient, aitunnel) -> None:
    aitunnel.edit_images.return_value = {"image_base64": None, "image_url": None}

    with pytest.raises(GenerationError):
        await client.generate(b"A", b"B")


@pytest.mark.asyncio
async def test_generate_fails_on_corrupt_base64(client: GenerationClient, aitunnel) -> None:
    aitunnel.edit_images.return_value = {"image_base64": "***", "image_url": None}

    with pytest.raises(GenerationError):
        await client.generate(b"A", b"B")


@pytest.mark.asyncio
async def test_download_failure_is_generation_error(client: GenerationClient, aitunnel) -> None:
    aitunnel.edit_images.return_value = {"image_base64": None, "image_url": "https://cdn.test/out.png"}
    aitunnel.download.side_effect = AITunnelRequestError("404", status_code=404)

    with pytest.raises(GenerationError):
        await client.generate(b"A", b"B")


@pytest.mark.asyncio
async def test_truncated_upload_is_generation_error(mocker: pytest_mock.MockerFixture) -> None:
    buffer = BytesIO()
    Image.effect_noise((64, 64), 64).save(buffer, format="PNG")
    truncated = buffer.getvalue()[:200]
    settings = TryOnSettings(aitunnel_api_key="test-key")
    aitunnel = AITunnelClient(settings)
    edit = mocker.patch.object(aitunnel._openai.images, "edit", new=mocker.AsyncMock())
    try:
        with pytest.raises(GenerationError):
            await GenerationClient(aitunnel, settings).generate(truncated, truncated)
    finally:
        await aitunnel.close()

    edit.assert_not_awaited()
