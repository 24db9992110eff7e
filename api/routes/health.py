"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Request
from datetime import datetime, timezone
import platform


router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "order-orchestrator",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Reports the state of the background queue worker.
    """
    task = getattr(request.app.state, "worker_task", None)
    worker = getattr(request.app.state, "worker", None)

    if task is None:
        worker_state = "disabled"
    elif task.done():
        worker_state = "stopped"
    else:
        worker_state = "running"

    return {
        "status": "not_ready" if worker_state == "stopped" else "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "api": "ok",
            "worker": worker_state,
            "drain_cycles": worker.cycles if worker is not None else 0,
            "connection_failures": worker.connection_failures if worker is not None else 0,
        }
    }
