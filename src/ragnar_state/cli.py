"""
Command-line interface for computing Ragnar link frames.

Usage:
    ragnar-frames config.yaml points.yaml [-v]
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from .config import Config
from .core import IntermediatePoints, build_axis_table
from .errors import RagnarStateError
from .frames import build_frame_set
from .transforms import se3


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def load_points(points_path: str) -> IntermediatePoints:
    """Read chain points from YAML with keys ``a``, ``b`` and ``c``.

    Each key holds four ``[x, y, z]`` points, one per arm.
    """
    path = Path(points_path)
    if not path.exists():
        raise FileNotFoundError(f"Points file not found: {points_path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    missing = [key for key in ('a', 'b', 'c') if key not in data]
    if missing:
        raise ValueError(f"Points file is missing keys: {missing}")

    return IntermediatePoints.from_points(data['a'], data['b'], data['c'])


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description='Compute the link frames of a Ragnar robot from its chain points',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Print frames as YAML
    ragnar-frames config.yaml points.yaml

    # Verbose output
    ragnar-frames config.yaml points.yaml -v
'''
    )

    parser.add_argument('config', type=str, help='Path to YAML configuration file')
    parser.add_argument('points', type=str, help='Path to YAML file with chain points a, b, c')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = Config.from_yaml(args.config)
        points = load_points(args.points)

        axis_table = build_axis_table(config.geometry)
        frames = build_frame_set(points, axis_table, config.geometry)

        parent = config.publisher.prefix + 'base_link'
        output = []
        for name, transform in frames.items():
            output.append({
                'parent': parent,
                'child': config.publisher.prefix + name,
                'translation': [float(v) for v in se3.get_position(transform)],
                'quaternion': [float(v) for v in se3.get_quaternion(transform)],
            })

        yaml.safe_dump(output, sys.stdout, default_flow_style=None, sort_keys=False)
        logger.info(f"Computed {len(frames)} frames")
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (ValueError, RagnarStateError) as e:
        logger.error(f"Invalid input: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
