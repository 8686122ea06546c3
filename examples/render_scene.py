#!/usr/bin/env python3
"""Render one of the preset scenes to an image file.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME        cornell, showcase, sphere or ground (default: cornell)
    --mode MODE         deterministic or monte-carlo (default: monte-carlo)
    --width WIDTH       Image width in pixels (default: 256)
    --height HEIGHT     Image height in pixels (default: 256)
    --samples SAMPLES   Samples per pixel (default: 64)
    --depth DEPTH       Maximum path depth (default: 8)
    --seed SEED         Render seed (default: 0)
    --workers N         CPU worker threads (default: all cores)
    --tone-map NAME     none, reinhard or exposure (default: none)
    --output OUTPUT     Output .png or .ppm path (default: render.png)
    --progress          Show a progress bar
    --verbose           Log at DEBUG level

Example:
    python examples/render_scene.py --scene showcase --mode deterministic --samples 4
"""

import argparse
import logging
import sys
from pathlib import Path

SCENES = ("cornell", "showcase", "sphere", "ground")
MODES = {"deterministic": 0, "monte-carlo": 1}

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--scene", choices=SCENES, default="cornell", help="Preset scene (default: cornell)")
    parser.add_argument("--mode", choices=sorted(MODES), default="monte-carlo", help="Integrator (default: monte-carlo)")
    parser.add_argument("--width", type=int, default=256, help="Image width in pixels (default: 256)")
    parser.add_argument("--height", type=int, default=256, help="Image height in pixels (default: 256)")
    parser.add_argument("--samples", type=int, default=64, help="Samples per pixel (default: 64)")
    parser.add_argument("--depth", type=int, default=8, help="Maximum path depth (default: 8)")
    parser.add_argument("--seed", type=int, default=0, help="Render seed (default: 0)")
    parser.add_argument("--workers", type=int, default=None, help="CPU worker threads (default: all cores)")
    parser.add_argument(
        "--tone-map",
        choices=("none", "reinhard", "exposure"),
        default="none",
        help="Tone mapping operator (default: none)",
    )
    parser.add_argument("--output", type=str, default="render.png", help="Output path (default: render.png)")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def build_scene(name: str):
    """Create the preset scene and camera called name."""
    # Lazy imports: these modules declare Taichi fields
    from lumen.scene.presets import (
        create_cornell_box_scene,
        create_emissive_ground_scene,
        create_showcase_scene,
        create_single_sphere_scene,
    )

    factories = {
        "cornell": create_cornell_box_scene,
        "showcase": create_showcase_scene,
        "sphere": create_single_sphere_scene,
        "ground": create_emissive_ground_scene,
    }
    return factories[name]()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from lumen.backend import init_backend
    from lumen.errors import LumenError

    try:
        init_backend(workers=args.workers)

        from lumen.config import RenderMode
        from lumen.output.export import save_image
        from lumen.render import render

        scene, camera = build_scene(args.scene)
        image = render(
            scene,
            camera,
            args.width,
            args.height,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            mode=RenderMode(MODES[args.mode]),
            seed=args.seed,
            tone_map=args.tone_map,
            progress=args.progress,
        )
        path = save_image(image, Path(args.output))
    except (LumenError, ValueError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Saved %s", path.absolute())
    return 0


if __name__ == "__main__":
    sys.exit(main())
