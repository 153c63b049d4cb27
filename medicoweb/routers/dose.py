from __future__ import annotations

from fastapi import APIRouter, HTTPException

from medicoweb.schemas.dose import DoseRequest, DoseResponse
from medicoweb.services.dose_service import (
    DoseCalculationError,
    DoseValidationError,
    request_dose,
    validate_dose_inputs,
)


router = APIRouter(prefix="/api", tags=["dose"])

DOSE_FAILURE_MESSAGE = "Failed to calculate dose. Please try again."


@router.post("/dose", response_model=DoseResponse)
async def calculate_dose(payload: DoseRequest):
    try:
        drug_name, age, weight = validate_dose_inputs(payload.drug_name, payload.age, payload.weight)
    except DoseValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        dose = await request_dose(drug_name, age, weight)
    except DoseCalculationError as exc:
        raise HTTPException(status_code=502, detail=DOSE_FAILURE_MESSAGE) from exc

    return DoseResponse(drug_name=drug_name, age=age, weight=weight, dose=dose)
