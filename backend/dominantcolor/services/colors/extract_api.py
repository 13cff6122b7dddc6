"""
Dominant Color API Orchestrator

Handles the upload and base64 input modes for dominant color estimation.
Coordinates decoding, the clustering engine, logging and metrics, and maps
every "no color" outcome to one response shape.
"""

import time

from fastapi import HTTPException, UploadFile

from dominantcolor.config import config
from dominantcolor.schemas import DominantColorResponse
from dominantcolor.services.colors.dominant import (
    DominantColorConfig,
    describe,
    estimate,
    rgba_to_hex,
)
from dominantcolor.services.imaging import (
    ImageDecodeError,
    decode_base64_image,
    decode_image_bytes,
)
from dominantcolor.utils.ids import generate_request_id
from dominantcolor.utils.logging import get_logger
from dominantcolor.utils.metrics import get_metrics

logger = get_logger()


def validate_upload(file: UploadFile) -> None:
    """
    Validate an uploaded file's declared size and content type.

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    size = getattr(file, "size", None)
    if size and size > config.max_file_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if not config.validate_mime_type(file.content_type):
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )


async def handle_upload(file: UploadFile, params: DominantColorConfig) -> DominantColorResponse:
    """Estimate the dominant color of an uploaded image file."""
    request_id = generate_request_id("dom")
    validate_upload(file)

    file_bytes = await file.read()
    if len(file_bytes) > config.max_file_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return _run(request_id, "upload", lambda: decode_image_bytes(file_bytes), params)


def handle_base64(image_b64: str, params: DominantColorConfig) -> DominantColorResponse:
    """Estimate the dominant color of a base64 encoded image."""
    request_id = generate_request_id("dom")
    return _run(request_id, "base64", lambda: decode_base64_image(image_b64), params)


def _run(request_id: str, mode: str, decode, params: DominantColorConfig) -> DominantColorResponse:
    metrics = get_metrics() if config.METRICS_ENABLED else None
    start_time = time.time()

    logger.info(f"Starting dominant color estimation: {mode} mode", extra={"request_id": request_id})
    if metrics:
        metrics.increment_counter("dominant_requests_total")
        metrics.increment_counter(f"dominant_mode_total_{mode}")

    try:
        image = decode()
    except ImageDecodeError as e:
        logger.warning(f"Image decode failed: {e}", extra={"request_id": request_id})
        if metrics:
            metrics.increment_counter("dominant_decode_failed_total")
            metrics.increment_counter("dominant_no_color_total")
        return DominantColorResponse(hex="", rgb=None, found=False, request_id=request_id, debug=None)

    decode_time = time.time() - start_time

    try:
        cluster_start = time.time()
        result = estimate(image, params)
        cluster_time = time.time() - cluster_start
    except Exception as e:
        logger.error(f"Dominant color estimation failed: {e}",
                     extra={"request_id": request_id, "error_type": type(e).__name__})
        if metrics:
            metrics.increment_failure_count(type(e).__name__)
        raise

    hex_color = rgba_to_hex(result.color)
    total_time = time.time() - start_time

    logger.info("Dominant color estimation completed",
                extra={
                    "request_id": request_id,
                    "mode": mode,
                    "hex": hex_color,
                    "clusters": result.cluster_count,
                    "iterations": result.iterations,
                    "ms_decode": decode_time * 1000,
                    "ms_kmeans": cluster_time * 1000,
                    "ms_total": total_time * 1000,
                    "result": "ok" if result.found else "no_color"
                })

    if metrics:
        metrics.record_timing("dominant_total", total_time * 1000)
        metrics.record_timing("kmeans", cluster_time * 1000)
        metrics.record_iterations(result.iterations)
        if not result.found:
            metrics.increment_counter("dominant_no_color_total")

    return DominantColorResponse(
        hex=hex_color,
        rgb=list(result.color[:3]) if result.found else None,
        found=result.found,
        request_id=request_id,
        debug=describe(result, params)
    )
