from __future__ import annotations

from fastapi import APIRouter

from ...config import get_settings

router = APIRouter(prefix="/diag", tags=["diagnostics"])


@router.get("/llm")
async def diag_llm():
    """Report upstream readiness without exposing the credential."""
    settings = get_settings()
    return {
        "provider": "deepseek",
        "has_api_key": settings.has_api_key,
        "base_url": settings.api_url,
        "model": settings.model,
        "ready": settings.has_api_key,
    }
