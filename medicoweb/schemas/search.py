from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medicoweb.schemas.monograph import Monograph


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageRef(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    data_uri: str
    mime_type: str = "image/png"


class SearchState(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    monograph: Monograph | None = None
    image: ImageRef | None = None
    loading: bool = False
    error: str | None = None
    has_searched: bool = False
    drug_name: str | None = None
    generation: int = 0


ViewKind = Literal["welcome", "loading", "error", "monograph", "empty"]


class SearchView(ApiModel):
    kind: ViewKind
    message: str | None = None
    show_image: bool = False
    dose_calculator_drug: str | None = None


class SearchRequest(ApiModel):
    drug_name: str = ""
    session_id: str | None = Field(default=None, max_length=128)


class SearchResponse(ApiModel):
    session_id: str
    state: SearchState
    view: SearchView
