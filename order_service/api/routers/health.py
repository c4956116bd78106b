# order_service/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "OK",
        "service": "order-service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
