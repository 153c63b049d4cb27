from __future__ import annotations

from medicoweb.schemas.search import ApiModel


class DoseRequest(ApiModel):
    drug_name: str = ""
    age: int | None = None
    weight: float | None = None


class DoseResponse(ApiModel):
    drug_name: str
    age: int
    weight: float
    dose: str
    disclaimer: str = (
        "This is an AI-generated dose suggestion based on standard parameters. "
        "It is not a substitute for professional medical advice. Always consult a "
        "qualified healthcare provider before making any decisions related to your "
        "health or treatment."
    )
