from medicoweb.schemas.dose import DoseRequest, DoseResponse
from medicoweb.schemas.monograph import (
    AdverseDrugReactions,
    BrandInfo,
    ClinicalCase,
    CounsellingTips,
    DosageInformation,
    DrugClassAndCategory,
    Interactions,
    Monograph,
    Pharmacodynamics,
    Pharmacokinetics,
    TherapeuticUses,
)
from medicoweb.schemas.search import ImageRef, SearchRequest, SearchResponse, SearchState, SearchView

__all__ = [
    "DoseRequest",
    "DoseResponse",
    "AdverseDrugReactions",
    "BrandInfo",
    "ClinicalCase",
    "CounsellingTips",
    "DosageInformation",
    "DrugClassAndCategory",
    "Interactions",
    "Monograph",
    "Pharmacodynamics",
    "Pharmacokinetics",
    "TherapeuticUses",
    "ImageRef",
    "SearchRequest",
    "SearchResponse",
    "SearchState",
    "SearchView",
]
