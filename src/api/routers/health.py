from fastapi import APIRouter
from ...core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.app_name,
        "env": settings.app_env,
        "ocr": "azure-di" if settings.az_di_endpoint and settings.az_di_api_key else "text-upload",
    }
