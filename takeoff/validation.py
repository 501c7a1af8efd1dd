"""
Bore-shot (HDD) path validation.

Two independent checks on a drilled 3-D path:
- Curvature: every interior vertex's local bend radius must be at least the
  tightest radius the installed conduits tolerate.
- Cover: every point must sit at least the guaranteed depth below grade.

The path passes only when both checks pass. Both always run so the caller
sees every violation at once.
"""

import logging
import math
from typing import Sequence

from .errors import InsufficientPoints
from .geometry import depth_profile, segment_curvature_radii
from .schemas import BoreShotValidation, DepthCheck, DepthViolation, RadiusCheck, RadiusViolation

logger = logging.getLogger(__name__)


def check_radius(points: Sequence, required_radius_m: float) -> RadiusCheck:
    """Flag each interior vertex whose local radius is below the requirement."""
    radii = segment_curvature_radii(points)

    violations = [
        RadiusViolation(segment_index=idx, actual_radius_m=radius,
                        required_radius_m=required_radius_m)
        for idx, radius in radii
        if radius < required_radius_m
    ]

    finite = [radius for _, radius in radii if math.isfinite(radius)]
    return RadiusCheck(
        passed=not violations,
        min_radius_required_m=required_radius_m,
        min_radius_actual_m=min(finite) if finite else None,
        violations=violations,
    )


def check_depth(points: Sequence, required_depth_m: float) -> DepthCheck:
    """Flag each point shallower than the guaranteed cover."""
    depths = depth_profile(points)

    violations = [
        DepthViolation(point_index=idx, actual_depth_m=depth,
                       required_depth_m=required_depth_m)
        for idx, depth in depths
        if depth < required_depth_m
    ]

    return DepthCheck(
        passed=not violations,
        min_depth_required_m=required_depth_m,
        min_depth_actual_m=min(d for _, d in depths) if depths else None,
        violations=violations,
    )


def validate_bore_shot(points: Sequence, required_radius_m: float,
                       required_depth_m: float) -> BoreShotValidation:
    """
    Run both path checks.

    Args:
        points: drilled path, every point carrying z (metres, negative below grade)
        required_radius_m: tightest bend the conduits tolerate
        required_depth_m: minimum guaranteed cover

    Returns:
        BoreShotValidation with passed = radius passed AND depth passed
    """
    if len(points) < 2:
        raise InsufficientPoints(
            f"bore path needs at least 2 points, got {len(points)}",
            field="coordinates", actual=len(points), expected=2,
        )

    radius_check = check_radius(points, required_radius_m)
    depth_check = check_depth(points, required_depth_m)

    if not radius_check.passed:
        logger.info("Bore path has %d bend(s) tighter than %.2f m",
                    len(radius_check.violations), required_radius_m)
    if not depth_check.passed:
        logger.info("Bore path has %d point(s) shallower than %.2f m",
                    len(depth_check.violations), required_depth_m)

    return BoreShotValidation(
        passed=radius_check.passed and depth_check.passed,
        radius_check=radius_check,
        depth_check=depth_check,
    )
