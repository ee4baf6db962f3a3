"""Experiment schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ExperimentCreate(BaseModel):
    """Experiment creation request."""

    name: str = Field(..., min_length=1, description="Experiment name")
    variants: list[str] = Field(..., description="Ordered variant labels")
    start_date: datetime | None = Field(None, description="Start of activation window")
    end_date: datetime | None = Field(None, description="End of activation window (exclusive)")

    model_config = {"json_schema_extra": {
        "example": {
            "name": "button_color",
            "variants": ["red", "blue", "green"],
        }
    }}


class ExperimentResponse(BaseModel):
    """Experiment response."""

    name: str = Field(..., description="Experiment name")
    variants: list[str] = Field(..., description="Ordered variant labels")
    start_date: datetime | None = Field(None, description="Start of activation window")
    end_date: datetime | None = Field(None, description="End of activation window")

    model_config = {"json_schema_extra": {
        "example": {
            "name": "button_color",
            "variants": ["red", "blue", "green"],
            "start_date": None,
            "end_date": None,
        }
    }}


class AssignmentsResponse(BaseModel):
    """Variant assignments for one visit."""

    assignments: dict[str, str] = Field(..., description="Experiment name to variant label")

    model_config = {"json_schema_extra": {
        "example": {
            "assignments": {
                "button_color": "blue",
                "title_text": "Showing version 1",
            },
        }
    }}


class ConversionResponse(BaseModel):
    """Conversion recording result."""

    received: int = Field(..., description="Number of assignment cookies received")
    recorded: int = Field(..., description="Number of conversions credited")
