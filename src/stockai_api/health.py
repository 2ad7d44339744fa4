import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Liveness probe reporting whether a crumb is currently cached."""
    store = request.app.state.container.credential_store
    return {
        "status": "ok",
        "crumb": "active" if store.has_token else "pending",
        "uptime": f"{int(time.monotonic() - _STARTED_AT)}s",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check() -> dict[str, Any]:
    """Readiness check for Kubernetes."""
    return {"status": "ready"}
