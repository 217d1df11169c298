"""Health check endpoint for the line sorter API."""

from fastapi import APIRouter, Depends

from src import __version__
from src.api.dependencies.line_sorter import get_sorter_config
from src.api.models.health import HealthResponse
from src.config.sorter_config import SorterServiceConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: SorterServiceConfig = Depends(get_sorter_config),
) -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        storage_backend=config.storage_backend,
    )
