"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: "healthy" when the service is up.
        version: Service version.
        storage_backend: Active storage backend ("memory" or "postgres").
    """

    status: str
    version: str
    storage_backend: str
