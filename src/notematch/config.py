"""Parameter models for template building and distance matching.

Both models are Pydantic models so that values coming from the command line
or from a calling pipeline are validated before any array is touched.
"""

from pydantic import BaseModel, Field


class TemplateParams(BaseModel):
    """Weights assigned to sampled key points when a template is built.

    Attributes:
        foreground_weight: Weight of each contour point expected on ink.
        background_weight: Weight of each point expected off ink.
    """

    model_config = {"frozen": True}

    foreground_weight: float = Field(
        1.0, gt=0.0, allow_inf_nan=False, description="Weight of foreground key points"
    )
    background_weight: float = Field(
        1.0, gt=0.0, allow_inf_nan=False, description="Weight of background key points"
    )


class MatcherParams(BaseModel):
    """Configuration of the distance matcher.

    Attributes:
        reference_depth: Distance in pixels below which a background key
            point starts being penalized (default 1.0).
        workers: Number of threads scoring anchor rows (default 1).
        chunk_rows: Number of anchor rows scored per task (default 64).
    """

    model_config = {"frozen": True}

    reference_depth: float = Field(
        1.0, ge=0.0, allow_inf_nan=False, description="Background reference depth in pixels"
    )
    workers: int = Field(1, ge=1, le=64, description="Number of scoring threads")
    chunk_rows: int = Field(64, ge=1, description="Anchor rows per scoring task")
