"""Health check endpoints for Kubernetes probes."""

from fastapi import APIRouter, Depends

from ..dependencies.services import get_repository
from ..repository import TaskRepository

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint for Kubernetes liveness probe.
    Returns 200 OK if the service is running.
    """
    return {"status": "healthy", "service": "wantodo-backend"}


@router.get("/ready")
def readiness_check(repository: TaskRepository = Depends(get_repository)):
    """
    Readiness check endpoint for Kubernetes readiness probe.
    Returns 200 OK once the task storage has been initialized.
    """
    return {"status": "ready", "service": "wantodo-backend", "storage": type(repository).__name__}
