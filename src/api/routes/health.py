"""Health check endpoint."""

from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import get_mongodb_client, ping

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Report MongoDB connectivity. 503 when the entries store is unreachable."""
    client = get_mongodb_client()
    healthy = client is not None and ping(client)
    body = {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {
            "mongodb": {
                "status": "healthy" if healthy else "unhealthy",
                "message": "Connection successful" if healthy else "Connection failed or not configured",
            }
        },
    }
    return JSONResponse(
        content=body,
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
