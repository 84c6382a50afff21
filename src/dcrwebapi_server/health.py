from typing import Any

from fastapi import APIRouter, HTTPException, Request

from dcrwebapi import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Liveness: the process is up and serving."""
    return {"status": "healthy", "version": __version__}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness: the first refresh cycle has completed."""
    context = request.app.state.context
    status = {
        "status": "ready" if context.ready else "warming_up",
        "refresh_cycles": context.orchestrator.cycles,
        "refresh_loop_running": context.orchestrator.running,
    }

    if not context.ready:
        raise HTTPException(status_code=503, detail=status)

    return status
