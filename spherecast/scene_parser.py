"""
Scene description parser.

Every constant of the reference render can be set from a YAML or JSON
file. Missing sections and keys fall back to the reference values.

Example scene file:
```yaml
camera:
  image_height: 480
  aspect_ratio: 1.3333333333333333   # or image_width: 640
  viewport_height: 2.0
  eye: [0, 0, 0]
  focal_offset: [0, 0, -1]

sphere:                               # null renders background only
  center: [0, 0, -3]
  radius: 1

shading:
  background: [0.2, 0.2, 0.2]         # or "#333333"
  normal_offset: [0, 0, 5]
  normal_mode: proxy                  # or surface

render:
  threads: 1
  rows_per_task: 16
  clamp: false
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import json
import logging

import yaml

from .vec3 import Vec3, Color
from .camera import Camera
from .shapes import Sphere
from .shading import Scene
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_HEIGHT = 480
DEFAULT_ASPECT_RATIO = 4.0 / 3.0
DEFAULT_VIEWPORT_HEIGHT = 2.0
DEFAULT_SPHERE = {'center': [0, 0, -3], 'radius': 1.0}

_SECTIONS = ('camera', 'sphere', 'shading', 'render')


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.scene: Optional[Scene] = None
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        return self.parse_dict(self.read_file(filepath))

    def read_file(self, filepath: str) -> Dict[str, Any]:
        """Read a scene file into a plain dictionary without interpreting it."""
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (ValueError, yaml.YAMLError) as e:
            raise SceneParseError(f"Invalid scene file {filepath}: {e}") from e

        logger.info("Loaded scene file %s", path)
        return data if data is not None else {}

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise SceneParseError(f"Unknown scene sections: {', '.join(sorted(unknown))}")

        try:
            self._parse_camera(self._section(data, 'camera'))
            self._parse_scene(data.get('sphere', DEFAULT_SPHERE), self._section(data, 'shading'))
            self._parse_settings(self._section(data, 'render'))
        except (TypeError, ValueError) as e:
            raise SceneParseError(str(e)) from e

        return self.scene, self.camera, self.settings

    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise SceneParseError(f"Section '{name}' must be a mapping")
        return section

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#'):
                hex_color = data[1:]
                if len(hex_color) == 6:
                    r = int(hex_color[0:2], 16) / 255.0
                    g = int(hex_color[2:4], 16) / 255.0
                    b = int(hex_color[4:6], 16) / 255.0
                    return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        image_height = self._parse_int(
            camera_data.get('image_height', DEFAULT_IMAGE_HEIGHT), 'camera.image_height'
        )
        viewport_height = float(camera_data.get('viewport_height', DEFAULT_VIEWPORT_HEIGHT))
        eye = self._parse_vec3(camera_data.get('eye', [0, 0, 0]))
        focal_offset = self._parse_vec3(camera_data.get('focal_offset', [0, 0, -1]))

        if 'image_width' in camera_data:
            if 'aspect_ratio' in camera_data:
                raise SceneParseError("Give either camera.image_width or camera.aspect_ratio, not both")
            self.camera = Camera(
                image_width=self._parse_int(camera_data['image_width'], 'camera.image_width'),
                image_height=image_height,
                viewport_height=viewport_height,
                eye=eye,
                focal_offset=focal_offset
            )
        else:
            self.camera = Camera.from_aspect_ratio(
                image_height=image_height,
                aspect_ratio=float(camera_data.get('aspect_ratio', DEFAULT_ASPECT_RATIO)),
                viewport_height=viewport_height,
                eye=eye,
                focal_offset=focal_offset
            )

    def _parse_scene(self, sphere_data: Any, shading_data: Dict[str, Any]) -> None:
        """Parse the sphere and shading sections."""
        sphere = None
        if sphere_data is not None:
            if not isinstance(sphere_data, dict):
                raise SceneParseError("Section 'sphere' must be a mapping or null")
            center = self._parse_vec3(sphere_data.get('center', DEFAULT_SPHERE['center']))
            radius = float(sphere_data.get('radius', DEFAULT_SPHERE['radius']))
            sphere = Sphere(center, radius)

        self.scene = Scene(
            sphere=sphere,
            background=self._parse_color(shading_data.get('background', [0.2, 0.2, 0.2])),
            normal_offset=self._parse_vec3(shading_data.get('normal_offset', [0, 0, 5])),
            normal_mode=str(shading_data.get('normal_mode', 'proxy')).lower()
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        self.settings = RenderSettings(
            num_threads=self._parse_int(settings_data.get('threads', 1), 'render.threads'),
            rows_per_task=self._parse_int(settings_data.get('rows_per_task', 16), 'render.rows_per_task'),
            clamp=self._parse_bool(settings_data.get('clamp', False), 'render.clamp')
        )

    def _parse_int(self, data: Any, name: str) -> int:
        """Accept only whole numbers; bools and floats are rejected."""
        if isinstance(data, bool) or not isinstance(data, int):
            raise SceneParseError(f"{name} must be an integer, got {data!r}")
        return data

    def _parse_bool(self, data: Any, name: str) -> bool:
        """Accept only true/false, never strings like "false"."""
        if not isinstance(data, bool):
            raise SceneParseError(f"{name} must be true or false, got {data!r}")
        return data


def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)


def default_scene() -> Tuple[Scene, Camera, RenderSettings]:
    """The reference render: 640x480, unit sphere at (0, 0, -3)."""
    return parse_scene({})
