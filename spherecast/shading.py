"""
Shading: turns a camera ray into a color.

The scene is one optional sphere in front of a flat background. Hits are
colored by mapping a unit "normal" from [-1, 1] to [0, 1] per channel.

By default the normal is a proxy, the hit point offset by a fixed vector
and normalized. With the reference sphere at (0, 0, -3) and offset
(0, 0, 5) this is not the true surface normal, but it is what the
reference image shows. ``normal_mode="surface"`` uses the real outward
normal instead.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import Sphere

NORMAL_MODES = ('proxy', 'surface')


@dataclass
class Scene:
    """Scene content and shading parameters."""
    sphere: Optional[Sphere] = None
    background: Color = field(default_factory=lambda: Color(0.2, 0.2, 0.2))
    normal_offset: Vec3 = field(default_factory=lambda: Vec3(0, 0, 5))
    normal_mode: str = 'proxy'

    def __post_init__(self):
        if self.normal_mode not in NORMAL_MODES:
            raise ValueError(
                f"Unknown normal mode {self.normal_mode!r}, expected one of {NORMAL_MODES}"
            )


class Shader:
    """Maps rays to colors against a Scene. Stateless between rays."""

    def __init__(self, scene: Scene):
        self.scene = scene

    def ray_color(self, ray: Ray) -> Color:
        """Compute the color seen along a ray.

        Raises:
            ValueError: if the proxy normal input is a zero vector
        """
        sphere = self.scene.sphere
        if sphere is None:
            return self.scene.background

        hit = sphere.hit(ray)
        if hit is None:
            return self.scene.background

        if self.scene.normal_mode == 'surface':
            n = hit.normal
        else:
            n = (ray.at(hit.t) + self.scene.normal_offset).normalized()
        return (n + Color(1, 1, 1)) * 0.5
