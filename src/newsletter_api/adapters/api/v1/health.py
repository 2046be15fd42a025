from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    status: str


@router.get("/health_check", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: answers 200 as long as the process serves requests."""
    return HealthResponse(status="ok")
