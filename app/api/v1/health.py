"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from app.api.v1.deps import AppSettings

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="""
Liveness probe for monitoring and load balancers.

Returns a static payload; upstream services are not contacted.

**Response Example:**
```json
{
  "status": "OK",
  "message": "Readive API is running",
  "version": "2.0.0"
}
```

**No authentication required.**
    """,
)
async def health_check(settings: AppSettings) -> dict[str, Any]:
    """Health check endpoint for monitoring and load balancer probes."""
    return {
        "status": "OK",
        "message": f"{settings.app_name} is running",
        "version": settings.app_version,
    }
