"""API request models."""

from pydantic import BaseModel, Field


class CombineAudioRequest(BaseModel):
    """Request to synthesize and combine a list of lines."""

    lines: list[str] = Field(
        ...,
        min_length=1,
        description="Ordered lines of text; each becomes one spoken segment",
    )

    model_config = {"json_schema_extra": {
        "example": {
            "lines": ["Hello", "World"],
        }
    }}
