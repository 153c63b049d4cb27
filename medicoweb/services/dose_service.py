from __future__ import annotations

import math

from medicoweb.config import get_settings
from medicoweb.services.gemini_service import GeminiClient, GenerationError, get_gemini_client
from medicoweb.utils.logging import logger


SYSTEM_PROMPT = (
    "You are an expert clinical pharmacist. Your task is to calculate a suggested drug dose "
    "based on the provided patient information. The output should be a clear, concise statement "
    "about the suggested dose, including the rationale if applicable (e.g., based on weight). "
    "You must include a clear disclaimer that this is not medical advice and a healthcare "
    "professional should be consulted. Do not return JSON."
)

MISSING_INPUT_MESSAGE = "Please enter both age and weight."
NON_POSITIVE_MESSAGE = "Age and weight must be positive numbers."
WHOLE_YEARS_MESSAGE = "Age must be a whole number of years."
MISSING_DRUG_MESSAGE = "Search for a drug before calculating a dose."


class DoseValidationError(ValueError):
    """Dose inputs rejected locally; no request was made."""


class DoseCalculationError(GenerationError):
    """The dose call failed or came back empty."""


def validate_dose_inputs(drug_name: str | None, age: int | None, weight: float | None) -> tuple[str, int, float]:
    name = str(drug_name or "").strip()
    if not name:
        raise DoseValidationError(MISSING_DRUG_MESSAGE)
    if age is None or weight is None:
        raise DoseValidationError(MISSING_INPUT_MESSAGE)
    if not (math.isfinite(age) and math.isfinite(weight)):
        raise DoseValidationError(NON_POSITIVE_MESSAGE)
    if isinstance(age, bool) or int(age) != age:
        raise DoseValidationError(WHOLE_YEARS_MESSAGE)
    if age <= 0 or weight <= 0:
        raise DoseValidationError(NON_POSITIVE_MESSAGE)
    return name, int(age), float(weight)


def _format_weight(weight: float) -> str:
    return str(int(weight)) if float(weight).is_integer() else f"{weight:g}"


def build_dose_prompt(drug_name: str, age: int, weight: float) -> str:
    return (
        f"Calculate the dose for {drug_name} for a patient who is {age} years old and weighs "
        f"{_format_weight(weight)} kg. Provide a brief explanation."
    )


async def request_dose(
    drug_name: str,
    age: int | None,
    weight: float | None,
    client: GeminiClient | None = None,
) -> str:
    name, age, weight = validate_dose_inputs(drug_name, age, weight)

    settings = get_settings()
    client = client or get_gemini_client()
    failure = f"Failed to calculate dose for {name}."

    try:
        result = await client.generate_content(
            settings.gemini_dose_model,
            build_dose_prompt(name, age, weight),
            system_instruction=SYSTEM_PROMPT,
            temperature=settings.gemini_temperature,
        )
    except GenerationError as exc:
        logger.error("Dose request for %s failed: %s", name, str(exc))
        raise DoseCalculationError(failure) from exc

    text = result.text.strip()
    if not text:
        logger.error("Dose request for %s returned an empty response.", name)
        raise DoseCalculationError(failure)
    return text
