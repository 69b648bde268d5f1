from datetime import datetime, timezone
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest
from map_proxy.config import SERVICE_NAME

router = APIRouter()

@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/metrics")
async def metrics():
    return PlainTextResponse(generate_latest())
