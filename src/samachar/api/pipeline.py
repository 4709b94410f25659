"""Pipeline control API."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from samachar.core.orchestrator import CycleOrchestrator, get_orchestrator

router = APIRouter(prefix="/api/pipeline", tags=["pipeline"])


def require_orchestrator() -> CycleOrchestrator:
    """Resolve the running orchestrator or fail with 503."""
    orchestrator = get_orchestrator()
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return orchestrator


@router.post("/run")
async def trigger_cycle(
    orchestrator: CycleOrchestrator = Depends(require_orchestrator),
) -> dict[str, str]:
    """Start a cycle in the background."""
    if not orchestrator.trigger():
        return {"status": "already_running", "state": orchestrator.state.value}
    return {"status": "started", "state": orchestrator.state.value}


@router.get("/status")
async def get_status(
    orchestrator: CycleOrchestrator = Depends(require_orchestrator),
) -> dict[str, Any]:
    """Current state and the last cycle report."""
    report = orchestrator.last_report
    return {
        "state": orchestrator.state.value,
        "queue": {
            "limit": orchestrator.queue.limit,
            "running": orchestrator.queue.running,
            "pending": orchestrator.queue.pending,
        },
        "providers": orchestrator.pipeline.rewriter.provider_names,
        "last_report": report.to_dict() if report else None,
    }


@router.get("/stats")
async def get_stats(
    orchestrator: CycleOrchestrator = Depends(require_orchestrator),
) -> dict[str, Any]:
    """Stored article totals by region and genre."""
    try:
        return await orchestrator.store.stats()
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=f"Stats query failed: {e}") from e
