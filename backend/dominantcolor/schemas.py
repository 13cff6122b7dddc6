"""
Dominant Color API Schemas
Pydantic models for dominant color request/response validation.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("dominantcolor", description="Service name")


class DominantColorRequestBase64(BaseModel):
    """Base64 mode request."""
    image_b64: str = Field(
        ...,
        description="Base64-encoded image (PNG, JPEG, GIF, BMP, TIFF or WebP); data URLs accepted"
    )


class EstimatorSettings(BaseModel):
    """Parameters used for the estimate."""
    sample_image_size: int
    number_of_clusters: int
    unique_color_search_retries: int
    convergence_iterations: int
    maximum_brightness_threshold: int
    maximum_darkness_threshold: int


class DominantColorDebug(BaseModel):
    """Debug information for a dominant color estimate."""
    sample_width: int = Field(..., description="Width of the image after shrinking")
    sample_height: int = Field(..., description="Height of the image after shrinking")
    cluster_count: int = Field(..., description="Clusters that survived seeding")
    iterations: int = Field(..., description="Refinement rounds run")
    converged: bool = Field(..., description="Whether the centroids stopped moving")
    config: EstimatorSettings = Field(..., description="Estimator parameters")


class DominantColorResponse(BaseModel):
    """Dominant color response. An empty hex means no color was found."""
    hex: str = Field(
        ...,
        pattern=r"^([0-9a-f]{6})?$",
        description="Lowercase rrggbb hex of the dominant color, or empty string"
    )
    rgb: Optional[List[int]] = Field(
        None,
        min_length=3,
        max_length=3,
        description="Dominant color as [r, g, b]"
    )
    found: bool = Field(..., description="Whether a dominant color was found")
    request_id: str = Field(..., description="Request id for log correlation")
    debug: Optional[DominantColorDebug] = Field(None, description="Estimation details")
