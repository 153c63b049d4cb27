from __future__ import annotations

import json
import re

from pydantic import ValidationError

from medicoweb.config import get_settings
from medicoweb.schemas.monograph import MONOGRAPH_RESPONSE_SCHEMA, Monograph
from medicoweb.services.gemini_service import GeminiClient, GenerationError, get_gemini_client
from medicoweb.utils.logging import logger


SYSTEM_PROMPT = """
You are an expert medical writer and pharmacologist specializing in creating drug reference materials.
Your task is to generate a complete, medically accurate, copyright-free, and SEO-friendly drug monograph
based on the latest international guidelines (2024-2025).

RULES:
1. The language must be simple, clear, and professional.
2. The output must be a structured JSON object only.
3. For 'mechanismOfAction' and 'pharmacodynamics.pathway', provide a simplified, step-by-step pathway
   as an array of strings, suitable for creating a visual flowchart.
4. For 'counsellingTips', provide concise, practical advice for a patient.
5. For 'references', provide full, direct URLs to high-authority sources like DrugBank,
   PubMed (ncbi.nih.gov), or official FDA/EMA drug labels.
6. If a section has no information, provide an appropriate empty value
   (null for 'blackBoxWarning', an empty array for lists). Never omit a field.
""".strip()

_OPENING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_CLOSING_FENCE_RE = re.compile(r"\s*```$")


class MonographGenerationError(GenerationError):
    """Content generation failed: empty, undecodable, or mis-shaped payload, or a service fault."""


def build_monograph_prompt(drug_name: str) -> str:
    return f'Generate a complete drug monograph for the following drug: "{drug_name}".'


def strip_code_fence(text: str) -> str:
    raw = str(text or "").strip()
    raw = _OPENING_FENCE_RE.sub("", raw, count=1)
    raw = _CLOSING_FENCE_RE.sub("", raw, count=1)
    return raw.strip()


def parse_monograph(text: str) -> Monograph:
    """Decode a (possibly fenced) JSON payload into a validated ``Monograph``."""
    payload = strip_code_fence(text)
    if not payload:
        raise ValueError("Empty monograph payload.")
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("Monograph payload is not a JSON object.")
    return Monograph.model_validate(data)


async def request_monograph(drug_name: str, client: GeminiClient | None = None) -> Monograph:
    name = str(drug_name or "").strip()
    if not name:
        raise ValueError("Drug name must not be empty.")

    settings = get_settings()
    client = client or get_gemini_client()
    failure = f"Failed to generate monograph for {name}."

    try:
        result = await client.generate_content(
            settings.gemini_monograph_model,
            build_monograph_prompt(name),
            system_instruction=SYSTEM_PROMPT,
            response_schema=MONOGRAPH_RESPONSE_SCHEMA,
            response_mime_type="application/json",
            temperature=settings.gemini_temperature,
        )
    except GenerationError as exc:
        logger.error("Monograph request for %s failed: %s", name, str(exc))
        raise MonographGenerationError(failure) from exc

    text = result.text
    if not text.strip():
        logger.error("Monograph request for %s returned an empty response.", name)
        raise MonographGenerationError(failure)

    try:
        return parse_monograph(text)
    except json.JSONDecodeError as exc:
        logger.error("Monograph payload for %s is not valid JSON: %s", name, str(exc))
        raise MonographGenerationError(failure) from exc
    except ValidationError as exc:
        logger.error(
            "Monograph payload for %s does not match the schema (%d errors).",
            name,
            exc.error_count(),
        )
        raise MonographGenerationError(failure) from exc
    except ValueError as exc:
        logger.error("Monograph payload for %s rejected: %s", name, str(exc))
        raise MonographGenerationError(failure) from exc
