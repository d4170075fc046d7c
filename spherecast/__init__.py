"""
SphereCast - a minimal Python ray caster

Renders one sphere in front of a flat background:
- Immutable numpy-backed 3D vectors
- Closed-form ray/sphere intersection
- Pinhole camera with one ray per pixel
- Normal-visualizing shader
- Plain-text PPM (P3) output, PNG via Pillow
- YAML/JSON scene configuration
"""

__version__ = "0.1.0"
__author__ = "SphereCast Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HitRecord
from .camera import Camera
from .shading import Scene, Shader
from .renderer import Renderer, RenderSettings
from .ppm import (
    ImageWriteError, ImageFormatError,
    to_rgb_triplet, to_rgb_array, iter_ppm_lines, format_ppm,
    write_ppm, save_image, read_ppm
)
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene, default_scene
