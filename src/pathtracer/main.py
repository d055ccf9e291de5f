# main.py
"""Render a preset scene to a PPM or PNG image.

Usage:
    pathtracer [--scene N] [--width W] [--samples S] [--output PATH] ...

With no --output the image is written to stdout as a plain-text PPM, so
all status output goes to stderr.

Example:
    pathtracer --scene 6 --width 300 --aspect-ratio 1 --quality preview --output cornell.png
"""
import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from pathtracer.camera.camera import Camera
from pathtracer.config import DEFAULT_QUALITY, QUALITY_PRESETS, RenderSettings
from pathtracer.core.vector import Vector3
from pathtracer.renderer.raytracer import Renderer
from pathtracer.scenes import SCENE_NAMES, get_scene

logger = logging.getLogger(__name__)

FOCUS_DIST = 10.0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Offline path tracer for a set of preset scenes.",
        epilog="Scenes: " + ", ".join(f"{k}={v}" for k, v in SCENE_NAMES.items()),
    )
    parser.add_argument("--scene", type=int, default=1,
                        help="Scene preset id (default: 1)")
    parser.add_argument("--width", type=int, default=None,
                        help="Image width in pixels (default: 600)")
    parser.add_argument("--aspect-ratio", type=float, default=None,
                        help="Width / height (default: 1.5)")
    parser.add_argument("--samples", type=int, default=None,
                        help="Samples per pixel (default: from --quality)")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Maximum bounces per path (default: from --quality)")
    parser.add_argument("--threads", type=int, default=None,
                        help="Worker threads (default: 8)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for scene layout and sampling")
    parser.add_argument("--quality", choices=sorted(QUALITY_PRESETS), default=DEFAULT_QUALITY,
                        help=f"Quality preset (default: {DEFAULT_QUALITY})")
    parser.add_argument("--texture", type=str, default=None,
                        help="Image used by the textured scenes (4 and 8)")
    parser.add_argument("--obj", type=str, default=None,
                        help="Wavefront OBJ model for scene 11")
    parser.add_argument("--output", type=str, default=None,
                        help="Output path, .ppm or any Pillow format (default: PPM on stdout)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = RenderSettings.from_preset(
        args.quality,
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        threads=args.threads,
        seed=args.seed,
        scene=args.scene,
    ).validate()

    scene_rng = random.Random(settings.seed)
    print("\n=== Creating World ===", file=sys.stderr)
    scene = get_scene(settings.scene, scene_rng, texture_path=args.texture, obj_path=args.obj)
    print(f"Scene: {settings.scene} ({SCENE_NAMES.get(settings.scene, SCENE_NAMES[1])})", file=sys.stderr)
    print(f"Camera position: {scene.lookfrom}", file=sys.stderr)
    print(f"Camera target: {scene.lookat}", file=sys.stderr)

    camera = Camera(
        scene.lookfrom,
        scene.lookat,
        Vector3(0.0, 1.0, 0.0),
        scene.vfov,
        settings.aspect_ratio,
        aperture=scene.aperture,
        focus_dist=FOCUS_DIST,
        time_start=0.0,
        time_end=1.0,
    )

    print("\n=== Initializing Renderer ===", file=sys.stderr)
    print(f"Render resolution: {settings.width}x{settings.height}", file=sys.stderr)
    print(f"Quality settings: {args.quality}", file=sys.stderr)
    print(f"Samples per pixel: {settings.samples_per_pixel}", file=sys.stderr)
    print(f"Max bounces: {settings.max_depth}", file=sys.stderr)
    print(f"Threads: {settings.threads}", file=sys.stderr)

    renderer = Renderer(
        scene.world,
        camera,
        settings.width,
        settings.height,
        samples_per_pixel=settings.samples_per_pixel,
        max_depth=settings.max_depth,
        background=scene.background,
        threads=settings.threads,
        seed=settings.seed,
    )
    start = time.time()
    image = renderer.render()
    logger.info("Rendered in %.2fs", time.time() - start)

    if args.output is None:
        image.write_ppm(sys.stdout)
    else:
        image.save(args.output)
        print(f"Saved image to {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
