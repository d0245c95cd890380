#!/usr/bin/env python3
"""Run an affordance analysis on a box or a mesh file and print a summary.

Without a mesh file, a 5 x 10 x 20 box is analysed. Operations and region
growing parameters are read from an OmegaConf YAML file.

Example usage:
    python scripts/analyze_affordances.py
    python scripts/analyze_affordances.py --extents 1 2 0.5 --rpy 0 0.3 0
    python scripts/analyze_affordances.py --mesh table.glb --yup-to-zup
"""

import argparse
import logging

from pathlib import Path

import numpy as np

from omegaconf import OmegaConf
from pydrake.math import RollPitchYaw

from affordance.analysis.affordance_extraction import (
    analyze_affordances_from_config,
)
from affordance.utils.geometry_utils import create_rigid_transform
from affordance.utils.mesh_loading import create_box_object, load_affordance_object

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
console_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = (
    Path(__file__).parent.parent / "configurations/affordance_analysis/default.yaml"
)


def main():
    parser = argparse.ArgumentParser(
        description="Run an affordance analysis and print a summary.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--mesh", type=Path, default=None, help="Mesh file (default: box)"
    )
    parser.add_argument(
        "--extents",
        type=float,
        nargs=3,
        default=[5.0, 10.0, 20.0],
        help="Box extents if no mesh is given (default: 5 10 20)",
    )
    parser.add_argument(
        "--rpy",
        type=float,
        nargs=3,
        default=[0.0, 0.0, 0.0],
        help="Object roll, pitch, yaw in radians (default: 0 0 0)",
    )
    parser.add_argument(
        "--xyz",
        type=float,
        nargs=3,
        default=[0.0, 0.0, 0.0],
        help="Object position (default: 0 0 0)",
    )
    parser.add_argument(
        "--yup-to-zup",
        action="store_true",
        help="Convert the mesh file from Y-up (GLTF) to Z-up",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Analysis config YAML",
    )

    args = parser.parse_args()

    transform = create_rigid_transform(
        rotation=RollPitchYaw(np.array(args.rpy)).ToRotationMatrix().matrix(),
        translation=np.array(args.xyz),
    )
    if args.mesh is not None:
        affordance_object = load_affordance_object(
            mesh_path=args.mesh,
            transform=transform,
            convert_yup_to_zup=args.yup_to_zup,
        )
    else:
        affordance_object = create_box_object(
            extents=args.extents, transform=transform
        )

    cfg = OmegaConf.load(args.config)
    console_logger.info(f"Operations: {OmegaConf.to_container(cfg.operations)}")

    semantics_data = analyze_affordances_from_config(
        affordance_object=affordance_object, cfg=cfg
    )

    for operation, affordances in zip(semantics_data.operations, semantics_data):
        console_logger.info(f"{operation.name}: {len(affordances)} affordances")
        for i, affordance in enumerate(affordances):
            console_logger.info(
                f"  [{i}] triangles {affordance.triangle_indices}, "
                f"area {affordance.area:.3f}"
            )


if __name__ == "__main__":
    main()
