import pytest

from medicoweb.services.gemini_service import GenerationError, GenerationResult
from medicoweb.services.image_service import (
    ImageGenerationError,
    build_image_prompt,
    find_inline_image,
    request_image,
)


def test_prompt_asks_for_brand_free_packaging():
    prompt = build_image_prompt("Amoxicillin")
    assert '"Amoxicillin"' in prompt
    assert "Do not include any real brand names or logos" in prompt
    assert "white background" in prompt


def test_find_inline_image_takes_first_binary_part():
    parts = [
        {"text": "Here is your image"},
        {"inlineData": {"mimeType": "image/png", "data": "Zmlyc3Q="}},
        {"inlineData": {"mimeType": "image/png", "data": "c2Vjb25k"}},
    ]
    assert find_inline_image(parts) == "Zmlyc3Q="


def test_find_inline_image_none_when_absent():
    assert find_inline_image([{"text": "sorry"}, {"inlineData": {"data": ""}}]) is None


@pytest.mark.asyncio
async def test_request_image_returns_png_data_uri(fake_client_factory):
    client = fake_client_factory(
        result=GenerationResult(parts=[{"text": "ok"}, {"inlineData": {"mimeType": "image/jpeg", "data": "aGVsbG8="}}])
    )

    image = await request_image("Paracetamol", client=client)

    assert image.data_uri == "data:image/png;base64,aGVsbG8="
    assert image.mime_type == "image/png"
    (call,) = client.calls
    assert call["model"] == "gemini-2.5-flash-image"
    assert "IMAGE" in call["response_modalities"]


@pytest.mark.asyncio
async def test_request_image_fails_without_inline_payload(fake_client_factory):
    client = fake_client_factory(result=GenerationResult(parts=[{"text": "no image today"}]))

    with pytest.raises(ImageGenerationError, match="No image data"):
        await request_image("Paracetamol", client=client)


@pytest.mark.asyncio
async def test_request_image_wraps_service_fault(fake_client_factory):
    client = fake_client_factory(error=GenerationError("Gemini API unreachable: ConnectError"))

    with pytest.raises(ImageGenerationError):
        await request_image("Paracetamol", client=client)
