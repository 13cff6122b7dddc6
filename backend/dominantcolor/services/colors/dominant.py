"""
Dominant color estimation.

Finds one representative color for an image with an approximate K-means
pass over its pixels in RGB space:

1. Seed up to N clusters with distinct colors drawn from random pixel
   positions. A slot that cannot find an unseen color within the retry
   budget ends seeding, so a single-color image collapses to one cluster.
2. Assign every opaque pixel to its nearest centroid, then move each
   centroid to the mean of its pixels.
3. Repeat step 2 until no centroid moves or the iteration budget runs out.
4. Walk the clusters heaviest first and return the first centroid whose
   channel sum lies strictly between the darkness and brightness bounds,
   falling back to the heaviest cluster.

The random generator is created per call from a constant seed, so the result
is a pure function of the image and the configuration.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

import numpy as np
from loguru import logger
from PIL import Image

from .clusters import RGB, ClusterGroup
from ..imaging import (
    ImageDecodeError,
    CHANNEL_SCALE,
    decode_base64_image,
    load_image,
    to_rgba16,
)

# Fixed seed for seed-color sampling
RANDOM_SEED = 0


@dataclass(frozen=True)
class DominantColorConfig:
    """Tuning knobs for one dominant color estimate."""
    sample_image_size: int = 256
    number_of_clusters: int = 4
    unique_color_search_retries: int = 10
    convergence_iterations: int = 50
    maximum_brightness_threshold: int = 665
    maximum_darkness_threshold: int = 100

    def __post_init__(self):
        if self.sample_image_size < 1:
            raise ValueError(f"sample_image_size must be >= 1, got {self.sample_image_size}")
        for name in ("number_of_clusters", "unique_color_search_retries", "convergence_iterations"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def new_default() -> DominantColorConfig:
    """Configuration with the standard defaults."""
    return DominantColorConfig()


def new(sample_image_size: int, number_of_clusters: int, unique_color_search_retries: int,
        convergence_iterations: int, maximum_brightness_threshold: int,
        maximum_darkness_threshold: int) -> DominantColorConfig:
    """Configuration with every parameter given explicitly."""
    return DominantColorConfig(
        sample_image_size=sample_image_size,
        number_of_clusters=number_of_clusters,
        unique_color_search_retries=unique_color_search_retries,
        convergence_iterations=convergence_iterations,
        maximum_brightness_threshold=maximum_brightness_threshold,
        maximum_darkness_threshold=maximum_darkness_threshold,
    )


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: int


# Returned when no dominant color exists
NO_COLOR = RGBA(0, 0, 0, 0)


@dataclass
class Estimate:
    """Dominant color together with how it was found."""
    color: RGBA
    sample_width: int
    sample_height: int
    cluster_count: int
    iterations: int
    converged: bool

    @property
    def found(self) -> bool:
        return self.color != NO_COLOR


def quantize(pixels: np.ndarray) -> np.ndarray:
    """Reduce 16-bit RGB channels to 8-bit."""
    return (pixels[..., :3] // CHANNEL_SCALE).astype(np.int64)


def seed_clusters(pixels: np.ndarray, config: DominantColorConfig, rng: np.random.Generator) -> ClusterGroup:
    """
    Pick up to number_of_clusters distinct starting colors.

    Each slot draws random pixel positions until it finds an opaque pixel
    whose color is not already a seed. Transparent draws use up a retry.
    When a slot exhausts its retries seeding stops, leaving a smaller group.

    Args:
        pixels: (H, W, 4) uint16 RGBA buffer with non-zero area
        config: Estimation parameters
        rng: Random generator used for pixel positions

    Returns:
        ClusterGroup with between 0 and number_of_clusters clusters
    """
    height, width = pixels.shape[:2]
    seeds: List[RGB] = []

    for slot in range(config.number_of_clusters):
        found = False
        for _ in range(config.unique_color_search_retries):
            x = int(rng.integers(width))
            y = int(rng.integers(height))
            r, g, b, a = (int(c) for c in pixels[y, x])
            # Ignore transparent pixels
            if a == 0:
                continue
            color = (r // CHANNEL_SCALE, g // CHANNEL_SCALE, b // CHANNEL_SCALE)
            if color not in seeds:
                seeds.append(color)
                found = True
                break
        if not found:
            logger.debug(f"Seeding stopped at slot {slot}: no unique color found")
            break

    logger.debug(f"Seeded {len(seeds)}/{config.number_of_clusters} clusters: {seeds}")
    return ClusterGroup(seeds)


def refine_clusters(clusters: ClusterGroup, pixels: np.ndarray, max_iterations: int) -> Tuple[int, bool]:
    """
    Run assignment/recentering rounds until convergence or max_iterations.

    Args:
        clusters: Seeded group, updated in place
        pixels: (H, W, 4) uint16 RGBA buffer
        max_iterations: Round budget

    Returns:
        Tuple of (rounds run, converged)
    """
    if not len(clusters):
        return 0, False

    flat = pixels.reshape(-1, 4)
    colors = quantize(flat[flat[:, 3] != 0])

    rounds = 0
    converged = False
    while rounds < max_iterations and not converged:
        clusters.reset()
        if len(colors):
            labels = clusters.closest(colors)
            clusters.add_points(colors, labels)
        converged = clusters.recompute_centroids()
        rounds += 1

    logger.debug(f"Refinement finished after {rounds} rounds (converged={converged})")
    return rounds, converged


def select_color(clusters: ClusterGroup, config: DominantColorConfig) -> RGBA:
    """
    Choose the heaviest cluster that is neither too bright nor too dark.

    Falls back to the heaviest cluster overall; returns NO_COLOR for an
    empty group.
    """
    ranked = clusters.by_weight()
    if not ranked:
        return NO_COLOR

    for cluster in ranked:
        summed_color = sum(cluster.centroid)
        if config.maximum_darkness_threshold < summed_color < config.maximum_brightness_threshold:
            return RGBA(*cluster.centroid, 255)

    logger.debug("No cluster inside brightness bounds, using heaviest")
    return RGBA(*ranked[0].centroid, 255)


def estimate(image: Union[Image.Image, np.ndarray], config: Optional[DominantColorConfig] = None) -> Estimate:
    """
    Estimate the dominant color of a decoded image.

    Args:
        image: PIL image or pixel array (see imaging.to_rgba16)
        config: Estimation parameters, defaults to new_default()

    Returns:
        Estimate with the color (NO_COLOR when none exists) and diagnostics
    """
    if config is None:
        config = new_default()

    # Shrink before widening to 16 bits per channel
    pixels = to_rgba16(image, config.sample_image_size)
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        logger.debug("Zero-area image, no dominant color")
        return Estimate(NO_COLOR, 0, 0, 0, 0, False)

    height, width = pixels.shape[:2]

    rng = np.random.default_rng(RANDOM_SEED)
    clusters = seed_clusters(pixels, config, rng)
    rounds, converged = refine_clusters(clusters, pixels, config.convergence_iterations)
    color = select_color(clusters, config)

    logger.debug(f"Dominant color {color} from {len(clusters)} clusters on {width}x{height} sample")
    return Estimate(
        color=color,
        sample_width=width,
        sample_height=height,
        cluster_count=len(clusters),
        iterations=rounds,
        converged=converged,
    )


def from_image(image: Union[Image.Image, np.ndarray], config: Optional[DominantColorConfig] = None) -> RGBA:
    """Dominant color of a decoded image, or NO_COLOR."""
    return estimate(image, config).color


def rgba_to_hex(color: RGBA) -> str:
    """Lowercase rrggbb hex for a color; empty string for NO_COLOR."""
    if color == NO_COLOR:
        return ""
    return f"{color.r:02x}{color.g:02x}{color.b:02x}"


def from_image_path(path: Union[str, Path], config: Optional[DominantColorConfig] = None) -> str:
    """
    Dominant color of an image file as hex.

    Returns an empty string if the file cannot be read or decoded, or if the
    image has no dominant color.
    """
    try:
        image = load_image(path)
    except ImageDecodeError as e:
        logger.warning(f"Could not load {path}: {e}")
        return ""
    return rgba_to_hex(from_image(image, config))


def from_base64_image(b64_data: str, config: Optional[DominantColorConfig] = None) -> str:
    """
    Dominant color of a base64 encoded image as hex.

    Returns an empty string on decode failure or when there is no dominant
    color.
    """
    try:
        image = decode_base64_image(b64_data)
    except ImageDecodeError as e:
        logger.warning(f"Could not decode base64 image: {e}")
        return ""
    return rgba_to_hex(from_image(image, config))


def describe(result: Estimate, config: DominantColorConfig) -> Dict[str, Any]:
    """Debug payload for an estimate."""
    return {
        "sample_width": result.sample_width,
        "sample_height": result.sample_height,
        "cluster_count": result.cluster_count,
        "iterations": result.iterations,
        "converged": result.converged,
        "config": config.to_dict(),
    }
