"""Route density heatmap generation.

Rasterizes every route of a network into an equirectangular density grid
for a rendering layer to sample.

Raster Layout:
- Row-major (height, width) float32 values in [0, 1]
- Column 0 is longitude -180, row 0 is latitude -90 (south pole)
- Horizontal neighbours wrap at the dateline, vertical ones clamp at the
  poles

Algorithm:
1. Sample each route's quadratic Bezier arc 84 times (t = 0..1)
2. Project each sample to the unit sphere and map it to a raster cell
3. Splat a normalized 9x9 Gaussian kernel (sigma 2.15) at the cell,
   weighted by the route's traffic tier and traffic score
4. Normalize by the peak and lift mid values with a 0.55 power curve

Concurrency:
Building the grid for a full network is CPU work on numpy arrays, so
build_heatmap_async hands a packed copy of the route data to a
concurrent.futures executor and immediately returns an all-zero
placeholder raster. When the worker finishes, its grid is swapped into the
raster under a lock and the raster's ready event is set. If the executor
refuses the job or the job fails, the grid is built once synchronously
instead. Both paths run the same kernel on the same packed array, so they
produce identical values.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Sequence

import numpy as np

from .constants import (
    HEATMAP_HEIGHT,
    HEATMAP_KERNEL_RADIUS,
    HEATMAP_KERNEL_SIGMA,
    HEATMAP_LIFT_POWER,
    HEATMAP_MIN_PEAK,
    HEATMAP_SAMPLES_PER_ROUTE,
    HEATMAP_WEIGHT_BASE,
    HEATMAP_WEIGHT_GAIN,
    HEATMAP_WIDTH,
    PACKED_ROUTE_STRIDE,
    TRAFFIC_MAX,
    TRAFFIC_MIN,
)
from .decorators import timed
from .exceptions import HeatmapBuildError
from .input_validation import ValidationContext, validate_positive_int
from .logger import logger
from .types import RouteData

__all__ = [
    "DensityRaster",
    "build_gaussian_kernel",
    "pack_routes",
    "accumulate_heat",
    "normalize_heat",
    "compute_heat_grid",
    "build_heatmap",
    "build_heatmap_async",
]


def build_gaussian_kernel(
    radius: int = HEATMAP_KERNEL_RADIUS, sigma: float = HEATMAP_KERNEL_SIGMA
) -> np.ndarray:
    """
    Build a normalized square Gaussian kernel.

    Args:
        radius: Half size; the kernel covers (2 * radius + 1)^2 taps
        sigma: Standard deviation in cells

    Returns:
        Array of shape (taps, 3) with columns (dx, dy, weight). Rows are
        ordered by dy, then dx. Weights sum to 1.
    """
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    weights = np.exp(-(dx * dx + dy * dy) / (2.0 * sigma * sigma))
    total = weights.sum()
    if total > 0:
        weights = weights / total
    return np.column_stack([dx.ravel(), dy.ravel(), weights.ravel()])


def pack_routes(routes: Sequence[RouteData]) -> np.ndarray:
    """
    Flatten routes into the array handed to heatmap workers.

    Each row is p0 (3), p1 (3), p2 (3), traffic, traffic_count.

    Returns:
        float64 array of shape (len(routes), 11)
    """
    packed = np.zeros((len(routes), PACKED_ROUTE_STRIDE), dtype=np.float64)
    for i, route in enumerate(routes):
        packed[i, 0:3] = route["p0"]
        packed[i, 3:6] = route["p1"]
        packed[i, 6:9] = route["p2"]
        packed[i, 9] = route["traffic"]
        packed[i, 10] = route["traffic_count"]
    return packed


def accumulate_heat(packed: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Splat route samples into a raw (unnormalized) heat grid.

    Args:
        packed: Array from pack_routes (any shape reshapeable to (n, 11))
        width: Raster width in cells
        height: Raster height in cells

    Returns:
        float64 array of shape (height, width)
    """
    packed = np.asarray(packed, dtype=np.float64).reshape(-1, PACKED_ROUTE_STRIDE)
    heat = np.zeros(width * height, dtype=np.float64)
    if len(packed) == 0:
        return heat.reshape(height, width)

    samples = HEATMAP_SAMPLES_PER_ROUTE
    t = np.arange(samples, dtype=np.float64) / (samples - 1)
    omt = 1.0 - t
    k0 = omt * omt
    k1 = 2.0 * omt * t
    k2 = t * t

    p0 = packed[:, None, 0:3]
    p1 = packed[:, None, 3:6]
    p2 = packed[:, None, 6:9]
    points = k0[None, :, None] * p0 + k1[None, :, None] * p1 + k2[None, :, None] * p2

    x = points[..., 0]
    y = points[..., 1]
    z = points[..., 2]
    length = np.sqrt(x * x + y * y + z * z)
    degenerate = length == 0
    safe_length = np.where(degenerate, 1.0, length)

    lat = 90.0 - np.degrees(np.arccos(np.clip(y / safe_length, -1.0, 1.0)))
    # lon + 180 measured from the same seam as lat_lon_to_vector
    lon_shifted = np.degrees(np.arctan2(z, -x))
    lat = np.where(degenerate, 0.0, lat)
    lon_shifted = np.where(degenerate, 180.0, lon_shifted)

    u = lon_shifted / 360.0
    u = u - np.floor(u)
    v = np.clip((lat + 90.0) / 180.0, 0.0, 1.0)

    cx = np.floor(u * width).astype(np.int64)
    cy = np.floor(v * height).astype(np.int64)

    traffic01 = np.clip((packed[:, 9] - TRAFFIC_MIN) / (TRAFFIC_MAX - TRAFFIC_MIN), 0.0, 1.0)
    route_weight = packed[:, 10] * (HEATMAP_WEIGHT_BASE + traffic01 * HEATMAP_WEIGHT_GAIN)
    per_sample = np.broadcast_to((route_weight / samples)[:, None], cx.shape).ravel()

    cx = cx.ravel()
    cy = cy.ravel()
    for dx, dy, weight in build_gaussian_kernel():
        xx = np.mod(cx + int(dx), width)
        yy = np.clip(cy + int(dy), 0, height - 1)
        heat += np.bincount(yy * width + xx, weights=per_sample * weight, minlength=width * height)

    return heat.reshape(height, width)


def normalize_heat(heat: np.ndarray) -> np.ndarray:
    """Scale raw heat to [0, 1] by its peak and apply the lift curve."""
    peak = max(HEATMAP_MIN_PEAK, float(np.max(heat))) if heat.size else HEATMAP_MIN_PEAK
    values = np.clip(heat / peak, 0.0, 1.0)
    return np.power(values, HEATMAP_LIFT_POWER).astype(np.float32)


def compute_heat_grid(packed: np.ndarray, width: int, height: int) -> np.ndarray:
    """Full kernel: packed routes in, normalized float32 grid out."""
    return normalize_heat(accumulate_heat(packed, width, height))


class DensityRaster:
    """Density grid shared between a builder and its readers.

    The grid is replaced wholesale, never mutated in place, so a reader
    holding a previous values array keeps a consistent snapshot.
    """

    def __init__(self, width: int, height: int, values: Optional[np.ndarray] = None, source: str = "placeholder"):
        self.width = width
        self.height = height
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._source = source
        if values is None:
            values = np.zeros((height, width), dtype=np.float32)
        self._values = self._freeze(values)
        if source != "placeholder":
            self._ready.set()

    @staticmethod
    def _freeze(values: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=np.float32)
        values.flags.writeable = False
        return values

    @property
    def values(self) -> np.ndarray:
        """Current (height, width) grid; read-only."""
        with self._lock:
            return self._values

    @property
    def ready(self) -> bool:
        """True once the real grid is in place."""
        return self._ready.is_set()

    @property
    def source(self) -> str:
        """Where the grid came from: placeholder, sync, worker, fallback or failed."""
        with self._lock:
            return self._source

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the grid is ready; returns False on timeout."""
        return self._ready.wait(timeout)

    def _replace(self, values: np.ndarray, source: str) -> None:
        if values.shape != (self.height, self.width):
            raise HeatmapBuildError(
                f"Grid shape {values.shape} does not match raster", self.width, self.height
            )
        frozen = self._freeze(values)
        with self._lock:
            self._values = frozen
            self._source = source
        self._ready.set()

    def to_bytes(self) -> bytes:
        """Quantize to one byte per cell (row-major)."""
        return self.to_gray().tobytes()

    def to_gray(self) -> np.ndarray:
        """Quantize to a (height, width) uint8 array, rounding half up."""
        return np.floor(self.values * 255.0 + 0.5).astype(np.uint8)

    def to_rgba(self) -> np.ndarray:
        """Quantize to a (height, width, 4) uint8 array: gray RGB, opaque alpha."""
        gray = self.to_gray()
        rgba = np.empty((self.height, self.width, 4), dtype=np.uint8)
        rgba[..., 0] = gray
        rgba[..., 1] = gray
        rgba[..., 2] = gray
        rgba[..., 3] = 255
        return rgba

    def __repr__(self) -> str:
        return f"DensityRaster({self.width}x{self.height}, source={self.source!r}, ready={self.ready})"


def _validate_dimensions(width: Any, height: Any) -> None:
    with ValidationContext("Heatmap raster size") as ctx:
        ctx.validate(width, validate_positive_int, "width")
        ctx.validate(height, validate_positive_int, "height")


@timed
def build_heatmap(
    routes: Sequence[RouteData], width: int = HEATMAP_WIDTH, height: int = HEATMAP_HEIGHT
) -> DensityRaster:
    """
    Build the density raster on the calling thread.

    Raises:
        ConfigurationError: If width or height is not a positive integer
    """
    _validate_dimensions(width, height)
    values = compute_heat_grid(pack_routes(routes), width, height)
    return DensityRaster(width, height, values, source="sync")


def build_heatmap_async(
    routes: Sequence[RouteData],
    width: int = HEATMAP_WIDTH,
    height: int = HEATMAP_HEIGHT,
    executor: Optional[Executor] = None,
    on_complete: Optional[Callable[[DensityRaster], None]] = None,
) -> DensityRaster:
    """
    Build the density raster on a background worker.

    Args:
        routes: Routes from build_routes
        width: Raster width in cells
        height: Raster height in cells
        executor: Executor to run the build on; a private single-thread
            pool is used (and shut down) if None
        on_complete: Called with the raster once the real grid is in place,
            on whichever thread finished the build

    Returns:
        DensityRaster that starts as an all-zero placeholder. Use
        raster.wait() or on_complete to pick up the finished grid.

    Raises:
        ConfigurationError: If width or height is not a positive integer
    """
    _validate_dimensions(width, height)
    raster = DensityRaster(width, height)
    routes = list(routes)
    packed = pack_routes(routes)

    def finish(values: np.ndarray, source: str) -> None:
        raster._replace(values, source)
        if on_complete is not None:
            on_complete(raster)

    def fallback(reason: BaseException) -> None:
        logger.warning(f"Heatmap worker failed ({reason}), building synchronously")
        finish(compute_heat_grid(pack_routes(routes), width, height), "fallback")

    def on_done(future: Future) -> None:
        try:
            values = future.result()
            if getattr(values, "shape", None) != (height, width):
                raise HeatmapBuildError("Worker returned an unusable grid", width, height)
        except Exception as e:
            try:
                fallback(e)
            except Exception:
                # Errors raised in a done-callback are only logged by concurrent.futures
                logger.exception("Synchronous heatmap fallback failed, keeping an empty grid")
                if not raster.ready:
                    finish(np.zeros((height, width), dtype=np.float32), "failed")
            return
        finish(values, "worker")

    own_executor = executor is None
    if own_executor:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="heatmap")

    try:
        future = executor.submit(compute_heat_grid, packed.copy(), width, height)
    except Exception as e:
        fallback(e)
        return raster
    finally:
        if own_executor:
            executor.shutdown(wait=False)

    future.add_done_callback(on_done)
    return raster
