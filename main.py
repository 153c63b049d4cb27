"""
MedicoWeb — AI-generated drug monographs
Built with FastAPI and Google Gemini.

Run locally with ``python main.py`` or ``uvicorn medicoweb.main:app --reload``.
"""

import uvicorn

from medicoweb.config import get_settings
from medicoweb.main import app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
