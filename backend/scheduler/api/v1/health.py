from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from scheduler.api.deps import DirectoryDep
from scheduler.core.config import settings
from scheduler.core.exceptions import UpstreamUnavailableError

router = APIRouter()


@router.get("/", summary="Health check")
def read_health() -> dict[str, str]:
    """Liveness check; never touches the store."""
    return {"status": "ok"}


@router.get("/ready", summary="Readiness check")
async def read_ready(directory: DirectoryDep):
    """Check that rooms and video accounts can be read from the store."""
    try:
        rooms = await directory.list_active_rooms()
        accounts = await directory.list_active_video_accounts()
    except UpstreamUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "store": "unavailable",
                "error": str(exc) if settings.ENVIRONMENT != "production" else "Store unavailable",
            },
        )
    return {
        "status": "ready",
        "store": "connected",
        "rooms": len(rooms),
        "video_accounts": len(accounts),
    }
