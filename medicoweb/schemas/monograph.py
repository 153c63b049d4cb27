"""
Monograph models.

These models are the single description of what a generated monograph looks
like. The same classes validate decoded payloads locally and, through
``build_response_schema``, produce the schema handed to Gemini as the
generation constraint.
"""

from __future__ import annotations

from types import UnionType
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


StringList = Annotated[list[str], BeforeValidator(_none_as_empty), Field(default_factory=list)]


class MonographModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DrugClassAndCategory(MonographModel):
    pharmacological_class: str
    therapeutic_category: str


class TherapeuticUses(MonographModel):
    fda_approved: StringList
    global_guidelines: StringList
    off_label: StringList


class AdverseDrugReactions(MonographModel):
    common: StringList
    serious: StringList
    rare: StringList
    black_box_warning: str | None = None


class Interactions(MonographModel):
    drug_drug: StringList
    drug_food: StringList
    drug_herbal: StringList


class Pharmacokinetics(MonographModel):
    absorption: str
    distribution: str
    metabolism: str
    excretion: str
    half_life: str
    bioavailability: str


class Pharmacodynamics(MonographModel):
    pathway: StringList


class DosageInformation(MonographModel):
    adult: str
    pediatric: str
    adjustments: str


class BrandInfo(MonographModel):
    brand_name: str
    company: str
    strengths: str


class ClinicalCase(MonographModel):
    case: str
    solution: str


class CounsellingTips(MonographModel):
    general_tips: StringList
    time_of_administration: str
    vehicle: str
    with_food: str
    foods_to_avoid: str


class Monograph(MonographModel):
    drug_name: str
    drug_class_and_category: DrugClassAndCategory
    introduction: str
    mechanism_of_action: StringList
    therapeutic_uses: TherapeuticUses
    adverse_drug_reactions: AdverseDrugReactions
    interactions: Interactions
    pharmacokinetics: Pharmacokinetics
    pharmacodynamics: Pharmacodynamics
    dosage_information: DosageInformation
    routes_of_administration: StringList
    common_brands_in_pakistan: Annotated[
        list[BrandInfo], BeforeValidator(_none_as_empty), Field(default_factory=list)
    ]
    clinical_cases: Annotated[
        list[ClinicalCase], BeforeValidator(_none_as_empty), Field(default_factory=list)
    ]
    counselling_tips: CounsellingTips
    references: StringList

    def is_empty(self) -> bool:
        """True when the record carries no usable content at all."""
        return _is_blank(self)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return all(_is_blank(item) for item in value)
    if isinstance(value, BaseModel):
        return all(_is_blank(getattr(value, name)) for name in type(value).model_fields)
    return False


def _schema_for(annotation: Any) -> dict[str, Any]:
    origin = get_origin(annotation)
    if origin in (Union, UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            raise TypeError(f"Only Optional[X] unions are supported, got: {annotation!r}")
        return {**_schema_for(members[0]), "nullable": True}
    if origin is list:
        (item,) = get_args(annotation)
        return {"type": "ARRAY", "items": _schema_for(item)}
    if annotation is str:
        return {"type": "STRING"}
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return _object_schema(annotation)
    raise TypeError(f"Unsupported annotation in response schema: {annotation!r}")


def _object_schema(model: type[BaseModel]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        properties[field.alias or name] = _schema_for(field.annotation)
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": list(properties),
    }


def build_response_schema(model: type[BaseModel] = Monograph) -> dict[str, Any]:
    """Gemini ``responseSchema`` for ``model``; every property is required at its level."""
    return _object_schema(model)


MONOGRAPH_RESPONSE_SCHEMA = build_response_schema(Monograph)
