import os

os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("APP_ENV", "test")

import copy

import pytest

from medicoweb.config import get_settings
from medicoweb.services.gemini_service import GenerationResult, get_gemini_client


PARACETAMOL_PAYLOAD = {
    "drugName": "Paracetamol",
    "drugClassAndCategory": {
        "pharmacologicalClass": "Analgesic, antipyretic",
        "therapeuticCategory": "Non-opioid analgesic",
    },
    "introduction": "Paracetamol is a widely used analgesic and antipyretic.",
    "mechanismOfAction": ["step1", "step2"],
    "therapeuticUses": {
        "fdaApproved": ["Mild to moderate pain", "Fever"],
        "globalGuidelines": ["First-line analgesic in WHO pain ladder"],
        "offLabel": [],
    },
    "adverseDrugReactions": {
        "common": ["Nausea"],
        "serious": ["Hepatotoxicity in overdose"],
        "rare": ["Stevens-Johnson syndrome"],
        "blackBoxWarning": None,
    },
    "interactions": {
        "drugDrug": ["Warfarin"],
        "drugFood": ["Alcohol"],
        "drugHerbal": [],
    },
    "pharmacokinetics": {
        "absorption": "Rapid oral absorption",
        "distribution": "Uniform",
        "metabolism": "Hepatic conjugation",
        "excretion": "Renal",
        "halfLife": "1-3 hours",
        "bioavailability": "63-89%",
    },
    "pharmacodynamics": {"pathway": ["Central COX inhibition", "Reduced prostaglandins"]},
    "dosageInformation": {
        "adult": "500-1000 mg every 4-6 hours, max 4 g/day",
        "pediatric": "10-15 mg/kg every 4-6 hours",
        "adjustments": "Reduce in hepatic impairment",
    },
    "routesOfAdministration": ["Oral", "Intravenous", "Rectal"],
    "commonBrandsInPakistan": [
        {"brandName": "Panadol", "company": "GSK", "strengths": "500 mg"},
    ],
    "clinicalCases": [
        {"case": "Adult with tension headache", "solution": "1 g orally"},
    ],
    "counsellingTips": {
        "generalTips": ["Do not exceed the maximum daily dose"],
        "timeOfAdministration": "As needed",
        "vehicle": "Water",
        "withFood": "With or without food",
        "foodsToAvoid": "Alcohol",
    },
    "references": ["https://go.drugbank.com/drugs/DB00316"],
}


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    get_gemini_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_gemini_client.cache_clear()


@pytest.fixture
def monograph_payload():
    return copy.deepcopy(PARACETAMOL_PAYLOAD)


class FakeGeminiClient:
    """Records calls and replays a canned result or exception."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else GenerationResult()
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, **kwargs):
        self.calls.append({"model": model, "contents": contents, **kwargs})
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_client_factory():
    return FakeGeminiClient
