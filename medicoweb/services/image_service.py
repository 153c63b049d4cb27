from __future__ import annotations

from typing import Any

from medicoweb.config import get_settings
from medicoweb.schemas.search import ImageRef
from medicoweb.services.gemini_service import GeminiClient, GenerationError, get_gemini_client


IMAGE_MIME_TYPE = "image/png"


class ImageGenerationError(GenerationError):
    """No inline image came back, or the call itself failed."""


def build_image_prompt(drug_name: str) -> str:
    return (
        "Generate a high-quality, photorealistic, copyright-free image of a generic pharmaceutical "
        f'product packaging for "{drug_name}". The box and blister pack should look professional and '
        "clinical. Do not include any real brand names or logos, but you can use the generic drug "
        "name on the box. Show the product on a clean, minimalist, white background."
    )


def find_inline_image(parts: list[dict[str, Any]]) -> str | None:
    """Base64 payload of the first part carrying inline binary data."""
    for part in parts:
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data"):
            return str(inline["data"])
    return None


async def request_image(drug_name: str, client: GeminiClient | None = None) -> ImageRef:
    name = str(drug_name or "").strip()
    if not name:
        raise ValueError("Drug name must not be empty.")

    settings = get_settings()
    client = client or get_gemini_client()
    failure = f"Failed to generate image for {name}."

    try:
        result = await client.generate_content(
            settings.gemini_image_model,
            build_image_prompt(name),
            response_modalities=["TEXT", "IMAGE"],
        )
    except GenerationError as exc:
        raise ImageGenerationError(failure) from exc

    payload = find_inline_image(result.parts)
    if not payload:
        raise ImageGenerationError(f"{failure} No image data found in the response.")

    return ImageRef(data_uri=f"data:{IMAGE_MIME_TYPE};base64,{payload}", mime_type=IMAGE_MIME_TYPE)
