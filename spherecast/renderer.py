"""
Renderer module - drives the camera and shader over the pixel grid.

Implements:
- One ray per pixel, row-major
- Optional multi-threaded rendering in bands of rows
- HDR float buffer output (no clamping)
"""

from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, List, Tuple
import numpy as np

from .camera import Camera
from .shading import Shader

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    num_threads: int = 1  # 0 = auto-detect
    rows_per_task: int = 16
    clamp: bool = False

    def __post_init__(self):
        if self.num_threads == 0:
            import os
            self.num_threads = os.cpu_count() or 4
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be >= 0, got {self.num_threads}")
        if self.rows_per_task < 1:
            raise ValueError(f"rows_per_task must be >= 1, got {self.rows_per_task}")


class Renderer:
    """Single-sample ray caster with optional row-band threading."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, shader: Shader, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            shader: Shader resolving each ray to a color
            camera: The camera to render from

        Returns:
            HDR image as numpy array of shape (height, width, 3), row 0 at the top
        """
        width = camera.image_width
        height = camera.image_height
        image = np.zeros((height, width, 3), dtype=np.float64)

        bands = self._generate_bands(height)
        total_bands = len(bands)
        completed_bands = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        def render_band(band: Tuple[int, int]) -> Tuple[Tuple[int, int], np.ndarray]:
            """Render rows [y0, y1)."""
            y0, y1 = band
            band_image = np.empty((y1 - y0, width, 3), dtype=np.float64)

            for j in range(y0, y1):
                for i, ray in enumerate(camera.row_rays(j)):
                    band_image[j - y0, i] = shader.ray_color(ray).to_array()

            with progress_lock:
                completed_bands[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_bands[0] / total_bands)

            return band, band_image

        logger.info(
            "Rendering %dx%d in %d bands on %d thread(s)",
            width, height, total_bands, self.settings.num_threads
        )
        start_time = time.perf_counter()

        if self.settings.num_threads > 1:
            # map() yields in submission order
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_band, bands))
        else:
            results = [render_band(band) for band in bands]

        for (y0, y1), band_image in results:
            image[y0:y1] = band_image

        logger.info("Render finished in %.2f s", time.perf_counter() - start_time)
        return image

    def _generate_bands(self, height: int) -> List[Tuple[int, int]]:
        """Split the rows into contiguous (y0, y1) bands, top to bottom."""
        step = self.settings.rows_per_task
        return [(y, min(y + step, height)) for y in range(0, height, step)]
