"""Service status schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    experiments_loaded: int = Field(..., description="Number of registered experiments")
    version: str = Field(..., description="API version")

    model_config = {"json_schema_extra": {
        "example": {
            "status": "healthy",
            "experiments_loaded": 2,
            "version": "dev",
        }
    }}
