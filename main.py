#!/usr/bin/env python3
"""
SphereCast - a one-sphere ray caster

Main entry point for rendering the scene to a PPM image.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from spherecast.shading import Shader
from spherecast.renderer import Renderer
from spherecast.ppm import save_image, ImageWriteError
from spherecast.scene_parser import SceneParser, SceneParseError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SphereCast - render one shaded sphere to a PPM image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py
  python main.py --height 240 --aspect 1.7777 --output wide.ppm
  python main.py --scene scenes/reference.yaml --threads 4 --output render.png
        '''
    )

    parser.add_argument('--scene', type=str, default=None, help='Scene file (YAML or JSON)')
    parser.add_argument('--height', type=int, default=None, help='Image height in pixels (default: 480)')
    parser.add_argument('--aspect', type=float, default=None, help='Aspect ratio width/height (default: 4/3)')
    parser.add_argument('--viewport-height', type=float, default=None,
                        help='Viewport height in scene units (default: 2.0)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto, default: 1)')
    parser.add_argument('--clamp', action='store_true', help='Clamp color channels to [0, 255]')
    parser.add_argument('--surface-normals', action='store_true',
                        help='Shade with true surface normals instead of the reference normal proxy')
    parser.add_argument('--output', type=str, default='image.ppm', help='Output filename (default: image.ppm)')
    parser.add_argument('--quiet', action='store_true', help='Only report errors')
    parser.add_argument('--verbose', action='store_true', help='Enable info logging')
    return parser


def apply_overrides(data: dict, args: argparse.Namespace) -> dict:
    """Merge command-line values over a scene description dictionary."""
    if not isinstance(data, dict):
        raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")
    sections = {}
    for name in ('camera', 'shading', 'render'):
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise SceneParseError(f"Section '{name}' must be a mapping")
        sections[name] = dict(section)
    camera, shading, render = sections['camera'], sections['shading'], sections['render']

    if args.height is not None:
        camera['image_height'] = args.height
    if args.aspect is not None:
        camera.pop('image_width', None)
        camera['aspect_ratio'] = args.aspect
    if args.viewport_height is not None:
        camera['viewport_height'] = args.viewport_height
    if args.surface_normals:
        shading['normal_mode'] = 'surface'
    if args.threads is not None:
        render['threads'] = args.threads
    if args.clamp:
        render['clamp'] = True

    merged = dict(data)
    merged.update(camera=camera, shading=shading, render=render)
    return merged


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    def say(*parts, **kwargs):
        if not args.quiet:
            print(*parts, **kwargs)

    parser = SceneParser()
    try:
        data = parser.read_file(args.scene) if args.scene else {}
        scene, camera, settings = parser.parse_dict(apply_overrides(data, args))
    except SceneParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Print header
    say("=" * 60)
    say("SphereCast")
    say("=" * 60)

    say(f"\nRender Settings:")
    say(f"  Resolution: {camera.image_width}x{camera.image_height}")
    say(f"  Viewport: {camera.viewport_width:.4f}x{camera.viewport_height:.4f}")
    say(f"  Sphere: {scene.sphere if scene.sphere is not None else 'none'}")
    say(f"  Normals: {scene.normal_mode}")
    say(f"  Threads: {settings.num_threads}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            say(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    say("\nRendering...")
    start_time = time.time()

    image = renderer.render(Shader(scene), camera)

    elapsed = time.time() - start_time
    say(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        say(f"  Rays per second: {(camera.image_width * camera.image_height) / elapsed:.0f}")

    output_path = Path(args.output)
    say(f"\nSaving to: {output_path}")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_image(image, output_path, clamp=settings.clamp)
    except (OSError, ImageWriteError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    say("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
