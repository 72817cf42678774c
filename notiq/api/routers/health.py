"""Health check (no auth, no API prefix)."""
from fastapi import APIRouter, status

from notiq.api.schemas.health import HealthOut

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Basic health")
def health() -> HealthOut:
    return HealthOut(ok=True, message="Server is running")
