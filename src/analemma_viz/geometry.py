"""Sphere projection helpers for Analemma Visualizer."""

import math
from typing import NamedTuple

# Radius of the sphere the analemma and daily sun paths are drawn on
PATH_RADIUS = 2.0


class SampledPoint(NamedTuple):
    """Cartesian point on the projection sphere."""

    x: float
    y: float
    z: float


def spherical_to_cartesian(
    altitude: float, azimuth: float, radius: float = PATH_RADIUS
) -> SampledPoint:
    """Project a horizontal position onto a sphere.

    Uses the physics convention with z as the polar axis: the polar angle is
    90 - altitude and the azimuthal angle is the azimuth.

    Args:
        altitude: Altitude in degrees.
        azimuth: Azimuth in degrees.
        radius: Sphere radius.

    Returns:
        SampledPoint on the sphere.
    """
    phi = math.radians(90 - altitude)
    theta = math.radians(azimuth)
    return SampledPoint(
        x=radius * math.sin(phi) * math.cos(theta),
        y=radius * math.sin(phi) * math.sin(theta),
        z=radius * math.cos(phi),
    )
