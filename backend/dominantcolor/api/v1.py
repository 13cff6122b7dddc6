"""
Dominant Color API Routes
Implements the /colors/dominant endpoints and supporting routes.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from dominantcolor.config import config
from dominantcolor.schemas import (
    DominantColorRequestBase64,
    DominantColorResponse,
    HealthResponse,
)
from dominantcolor.services.colors.dominant import DominantColorConfig, new_default
from dominantcolor.services.colors.extract_api import handle_base64, handle_upload
from dominantcolor.utils.metrics import get_metrics

_DEFAULTS = new_default()

router = APIRouter(tags=["Dominant Color"])


def estimator_params(
    sample_image_size: int = Query(_DEFAULTS.sample_image_size, ge=1, le=4096,
                                   description="Maximum edge of the sampled image"),
    number_of_clusters: int = Query(_DEFAULTS.number_of_clusters, ge=0, le=64,
                                    description="Number of color clusters"),
    unique_color_search_retries: int = Query(_DEFAULTS.unique_color_search_retries, ge=0, le=1000,
                                             description="Random draws per cluster seed"),
    convergence_iterations: int = Query(_DEFAULTS.convergence_iterations, ge=0, le=1000,
                                        description="Maximum refinement rounds"),
    maximum_brightness_threshold: int = Query(_DEFAULTS.maximum_brightness_threshold, ge=0, le=765,
                                              description="Exclusive upper bound on R+G+B"),
    maximum_darkness_threshold: int = Query(_DEFAULTS.maximum_darkness_threshold, ge=0, le=765,
                                            description="Exclusive lower bound on R+G+B"),
) -> DominantColorConfig:
    """Collect estimator overrides from the query string."""
    return DominantColorConfig(
        sample_image_size=sample_image_size,
        number_of_clusters=number_of_clusters,
        unique_color_search_retries=unique_color_search_retries,
        convergence_iterations=convergence_iterations,
        maximum_brightness_threshold=maximum_brightness_threshold,
        maximum_darkness_threshold=maximum_darkness_threshold,
    )


@router.get("/healthz", response_model=HealthResponse)
def health_check():
    """Service health check."""
    return HealthResponse(ok=True, version=config.VERSION, service=config.SERVICE_NAME)


@router.post("/colors/dominant", response_model=DominantColorResponse)
async def dominant_color_upload(
    file: UploadFile = File(..., description="Image file"),
    params: DominantColorConfig = Depends(estimator_params),
):
    """
    Find the dominant color of an uploaded image.

    Returns `found=false` with an empty `hex` when the image cannot be
    decoded or has no opaque pixels to cluster.
    """
    return await handle_upload(file, params)


@router.post("/colors/dominant/base64", response_model=DominantColorResponse)
def dominant_color_base64(
    body: DominantColorRequestBase64,
    params: DominantColorConfig = Depends(estimator_params),
):
    """Find the dominant color of a base64 encoded image."""
    return handle_base64(body.image_b64, params)


@router.get("/colors/metrics")
def dominant_color_metrics() -> Dict[str, Any]:
    """Get dominant color service metrics."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    return get_metrics().get_summary()
