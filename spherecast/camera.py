"""
Camera module for generating primary rays.

A pinhole camera looking down -Z from the eye point. The viewport is an
axis-aligned rectangle placed at ``eye + focal_offset``; one ray is cast
through the center of every pixel.
"""

from __future__ import annotations
import logging
from typing import Iterator, List, Tuple

from .vec3 import Vec3, Point3
from .ray import Ray

logger = logging.getLogger(__name__)


class Camera:
    """Viewport geometry and per-pixel ray generation."""

    def __init__(
        self,
        image_width: int,
        image_height: int,
        viewport_height: float = 2.0,
        eye: Point3 = Point3(0, 0, 0),
        focal_offset: Vec3 = Vec3(0, 0, -1)
    ):
        """Create a camera.

        Args:
            image_width: Output width in pixels
            image_height: Output height in pixels
            viewport_height: Height of the viewport in scene units
            eye: Camera position in world space (origin of every ray)
            focal_offset: Vector from the eye to the viewport center
        """
        if image_width < 1 or image_height < 1:
            raise ValueError(
                f"Image dimensions must be positive, got {image_width}x{image_height}"
            )
        if viewport_height <= 0:
            raise ValueError(f"Viewport height must be positive, got {viewport_height}")

        self.image_width = int(image_width)
        self.image_height = int(image_height)
        self.viewport_height = float(viewport_height)
        # Derived from the pixel grid so pixels stay square
        self.viewport_width = self.viewport_height * self.image_width / self.image_height
        self.eye = eye
        self.focal_offset = focal_offset

        # Negative v so that row 0 is the top of the scene
        self.viewport_u = Vec3(self.viewport_width, 0, 0)
        self.viewport_v = Vec3(0, -self.viewport_height, 0)

        self.pixel_delta_u = self.viewport_u / self.image_width
        self.pixel_delta_v = self.viewport_v / self.image_height

        viewport_upper_left = (
            self.eye
            + self.focal_offset
            + (self.viewport_u * -0.5 + self.viewport_v * -0.5)
        )
        self.pixel00 = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        logger.debug(
            "Camera %dx%d viewport %.4fx%.4f pixel00=%s",
            self.image_width, self.image_height,
            self.viewport_width, self.viewport_height, self.pixel00
        )

    @classmethod
    def from_aspect_ratio(
        cls,
        image_height: int,
        aspect_ratio: float,
        viewport_height: float = 2.0,
        eye: Point3 = Point3(0, 0, 0),
        focal_offset: Vec3 = Vec3(0, 0, -1)
    ) -> Camera:
        """Create a camera whose width follows from height and aspect ratio.

        The width is truncated to a whole number of pixels.
        """
        if aspect_ratio <= 0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        image_width = int(aspect_ratio * image_height)
        return cls(image_width, image_height, viewport_height, eye, focal_offset)

    @property
    def aspect_ratio(self) -> float:
        return self.image_width / self.image_height

    def pixel_center(self, i: int, j: int) -> Point3:
        """Scene-space center of pixel column i, row j (row 0 at the top)."""
        if not (0 <= i < self.image_width and 0 <= j < self.image_height):
            raise IndexError(
                f"Pixel ({i}, {j}) outside {self.image_width}x{self.image_height} image"
            )
        return self.pixel00 + (self.pixel_delta_u * i + self.pixel_delta_v * j)

    def get_ray(self, i: int, j: int) -> Ray:
        """Generate the ray from the eye through the center of pixel (i, j).

        The direction is left unnormalized.
        """
        return Ray(self.eye, self.pixel_center(i, j) - self.eye)

    def row_rays(self, j: int) -> List[Ray]:
        """All rays of row j, left to right."""
        return [self.get_ray(i, j) for i in range(self.image_width)]

    def iter_rays(self) -> Iterator[Tuple[int, int, Ray]]:
        """Yield (i, j, ray) in row-major order, top row first."""
        for j in range(self.image_height):
            for i in range(self.image_width):
                yield i, j, self.get_ray(i, j)

    def __repr__(self) -> str:
        return (
            f"Camera({self.image_width}x{self.image_height}, eye={self.eye}, "
            f"viewport={self.viewport_width:.4f}x{self.viewport_height:.4f})"
        )
