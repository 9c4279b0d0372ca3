# contact_relay/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_root():
    now = datetime.now(timezone.utc)
    return {
        "status": "Server is running",
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
