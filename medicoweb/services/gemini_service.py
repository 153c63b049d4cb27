from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import httpx

from medicoweb.config import DEFAULT_GEMINI_API_BASE, Settings, get_settings


class GenerationError(RuntimeError):
    """The generation service did not produce a usable response."""


@dataclass(frozen=True)
class GenerationResult:
    parts: list[dict[str, Any]] = field(default_factory=list)
    finish_reason: str | None = None

    @property
    def text(self) -> str:
        chunks = [
            str(part.get("text") or "")
            for part in self.parts
            if "text" in part and not part.get("thought")
        ]
        return "".join(chunks)


def _as_contents(contents: str | list[dict[str, Any]]) -> list[dict[str, Any]]:
    if isinstance(contents, str):
        return [{"role": "user", "parts": [{"text": contents}]}]
    return contents


def _parse_response(data: Any) -> GenerationResult:
    if not isinstance(data, dict):
        raise GenerationError("Gemini API returned an unexpected payload.")

    feedback = data.get("promptFeedback") or {}
    block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
    if block_reason:
        raise GenerationError(f"Prompt was blocked by the service: {block_reason}")

    parts: list[dict[str, Any]] = []
    finish_reason: str | None = None
    for candidate in data.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        if finish_reason is None:
            finish_reason = candidate.get("finishReason")
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            if isinstance(part, dict):
                parts.append(part)
    return GenerationResult(parts=parts, finish_reason=finish_reason)


class GeminiClient:
    """
    Thin async wrapper around the ``generateContent`` REST endpoint.

    Holds configuration only, so one instance is shared by every requestor and
    may serve any number of concurrent calls.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_GEMINI_API_BASE,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            settings.gemini_api_key,
            base_url=settings.gemini_api_base,
            timeout=settings.gemini_timeout_seconds,
        )

    async def generate_content(
        self,
        model: str,
        contents: str | list[dict[str, Any]],
        *,
        system_instruction: str | None = None,
        response_schema: dict[str, Any] | None = None,
        response_mime_type: str | None = None,
        temperature: float | None = None,
        response_modalities: list[str] | None = None,
    ) -> GenerationResult:
        if not self.api_key:
            raise GenerationError("GEMINI_API_KEY environment variable is not set.")

        generation_config: dict[str, Any] = {}
        if response_mime_type:
            generation_config["responseMimeType"] = response_mime_type
        if response_schema is not None:
            generation_config["responseSchema"] = response_schema
        if temperature is not None:
            generation_config["temperature"] = temperature
        if response_modalities:
            generation_config["responseModalities"] = response_modalities

        payload: dict[str, Any] = {"contents": _as_contents(contents)}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}/models/{model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise GenerationError(f"Gemini API error: {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise GenerationError(f"Gemini API unreachable: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            raise GenerationError("Gemini API returned a non-JSON response.") from exc

        return _parse_response(data)


@lru_cache(maxsize=1)
def get_gemini_client() -> GeminiClient:
    return GeminiClient.from_settings(get_settings())
