#!/usr/bin/env python3
"""
Face visibility and frustum clipping sweep.

This script moves the camera around a box model and, for every pose:
1. Tests the visibility of each face (visible / appearing)
2. Clips the visible faces against the configured planes
3. Projects the clipped boundary to the image and computes its bounding box
4. Logs a per-pose summary (optionally saved as JSON)

Usage:
    # Default config and a 36-step orbit
    python scripts/run_visibility.py

    # Custom config, more steps, debug logging
    python scripts/run_visibility.py --config configs/custom.yaml --steps 72 --log-level DEBUG

    # Save per-pose results
    python scripts/run_visibility.py --output outputs/visibility.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from mbt_geometry.calibration.pose import Pose
from mbt_geometry.config import GeometryConfig
from mbt_geometry.polygon import (
    FrustumClipper,
    Point3D,
    Polygon,
    ROIProjector,
)
from mbt_geometry.utils.logger import ProgressLogger, setup_logger


# =============================================================================
# Model
# =============================================================================

def build_box_faces(size: Tuple[float, float, float]) -> List[Polygon]:
    """
    Build the six faces of a box centered on the object origin.

    Corners are ordered so that the face normals computed from the first
    three corners point out of the box as seen from outside.
    """
    hx, hy, hz = (s / 2 for s in size)
    v = {
        "000": (-hx, -hy, -hz), "100": (hx, -hy, -hz),
        "110": (hx, hy, -hz), "010": (-hx, hy, -hz),
        "001": (-hx, -hy, hz), "101": (hx, -hy, hz),
        "111": (hx, hy, hz), "011": (-hx, hy, hz),
    }
    faces = [
        ["000", "010", "110", "100"],  # -Z
        ["001", "101", "111", "011"],  # +Z
        ["000", "100", "101", "001"],  # -Y
        ["010", "011", "111", "110"],  # +Y
        ["000", "001", "011", "010"],  # -X
        ["100", "110", "111", "101"],  # +X
    ]

    polygons = []
    for index, keys in enumerate(faces):
        polygon = Polygon(face_index=index)
        polygon.set_corners(Point3D.from_object(*v[k]) for k in keys)
        polygons.append(polygon)
    return polygons


def orbit_pose(angle: float, distance: float, elevation: float) -> Pose:
    """Camera looking at the object origin from a point on a circle around it."""
    # Rotation of the object about the camera Y axis, then pushed along Z
    tilt = Pose.from_translation_rotation_vector([0.0, 0.0, 0.0], [elevation, 0.0, 0.0])
    turn = Pose.from_translation_rotation_vector([0.0, 0.0, distance], [0.0, angle, 0.0])
    return tilt.compose(turn)


# =============================================================================
# Sweep
# =============================================================================

def run_sweep(
    geometry: GeometryConfig,
    faces: List[Polygon],
    steps: int,
    distance: float,
    elevation: float,
    logger,
) -> List[Dict[str, Any]]:
    """Run the visibility/clipping sweep and return per-pose results."""
    clipper = FrustumClipper(geometry.camera)
    projector = ROIProjector(geometry.camera)

    for face in faces:
        geometry.clipping.apply(face)

    results = []
    with ProgressLogger(steps, logger=logger, description="Orbit", log_interval=25) as progress:
        for step in range(steps):
            angle = 2 * np.pi * step / steps
            pose = orbit_pose(angle, distance, elevation)

            pose_result: Dict[str, Any] = {"step": step, "angle_deg": float(np.degrees(angle)), "faces": []}
            for face in faces:
                visible = geometry.visibility.is_visible(face, pose)
                face_result: Dict[str, Any] = {
                    "face": face.face_index,
                    "visible": visible,
                    "appearing": face.appearing,
                }

                if visible:
                    # is_visible left the face transformed for this pose
                    clipper.compute_clipped_boundary(face)
                    roi = projector.get_clipped_image_roi(face)
                    face_result.update({
                        "clipped_vertices": len(roi),
                        "corners_inside": projector.count_corners_inside_image(face),
                        "roi_inside": projector.is_region_inside_image(roi) if roi else False,
                        "bbox": list(projector.bounding_box(roi)) if roi else None,
                    })

                pose_result["faces"].append(face_result)

            n_visible = sum(1 for f in pose_result["faces"] if f["visible"])
            n_appearing = sum(1 for f in pose_result["faces"] if f["appearing"])
            logger.debug(
                f"Step {step:3d} ({pose_result['angle_deg']:6.1f} deg): "
                f"{n_visible} visible, {n_appearing} appearing"
            )

            results.append(pose_result)
            progress.update()

    return results


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Face visibility and frustum clipping sweep around a box model"
    )
    parser.add_argument("--config", type=str, default="default.yaml",
                        help="Geometry config file")
    parser.add_argument("--steps", type=int, default=36,
                        help="Number of poses on the orbit")
    parser.add_argument("--distance", type=float, default=0.5,
                        help="Distance from camera to object origin")
    parser.add_argument("--elevation", type=float, default=20.0,
                        help="Camera elevation (degrees)")
    parser.add_argument("--size", type=float, nargs=3, default=[0.2, 0.1, 0.3],
                        metavar=("SX", "SY", "SZ"), help="Box size")
    parser.add_argument("--output", type=str, default=None,
                        help="Optional JSON output file")
    parser.add_argument("--log-level", type=str, default="INFO",
                        help="Logging level")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Optional log file")
    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()

    logger = setup_logger("mbt_geometry", level=args.log_level, log_file=args.log_file)
    logger.info("=" * 60)
    logger.info("Face Visibility Sweep")
    logger.info("=" * 60)

    geometry = GeometryConfig.load(args.config)
    logger.info(f"Camera: {geometry.camera}")
    logger.info(f"Clipping: {geometry.clipping.to_dict()}")

    faces = build_box_faces(tuple(args.size))
    results = run_sweep(
        geometry,
        faces,
        steps=args.steps,
        distance=args.distance,
        elevation=np.radians(args.elevation),
        logger=logger,
    )

    visible_counts = [sum(f["visible"] for f in r["faces"]) for r in results]
    logger.info(f"Visible faces per pose: min={min(visible_counts)}, max={max(visible_counts)}")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2)
        logger.info(f"Results saved to {output_path}")


if __name__ == "__main__":
    main()
