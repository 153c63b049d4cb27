from __future__ import annotations

from fastapi import APIRouter

from medicoweb.config import get_settings


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    return {"status": "healthy"}


@router.get("/api/info")
def api_info() -> dict:
    settings = get_settings()
    return {
        "service": settings.app_name,
        "status": "online",
        "version": "1.0.0",
        "models": {
            "monograph": settings.gemini_monograph_model,
            "image": settings.gemini_image_model,
            "dose": settings.gemini_dose_model,
        },
        "endpoints": {
            "search": "POST /api/search",
            "search_state": "GET /api/search/<session_id>",
            "dose": "POST /api/dose",
            "schema": "GET /api/schema",
        },
        "disclaimer": (
            "Generated content is for educational purposes only and does not constitute "
            "medical advice. Always consult a qualified healthcare professional."
        ),
    }
