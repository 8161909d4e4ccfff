"""Angle arithmetic for compass headings.

Headings are degrees clockwise from north. Every helper here returns values in
``[0, 360)`` unless it explicitly produces a signed difference.
"""

from __future__ import annotations

import math

FULL_TURN = 360.0
HALF_TURN = 180.0
CARDINAL_DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
_SECTOR_DEGREES = FULL_TURN / len(CARDINAL_DIRECTIONS)


def normalize_degrees(degrees: float) -> float:
    """Wrap ``degrees`` into ``[0, 360)``."""

    wrapped = degrees % FULL_TURN
    # Tiny negative inputs round up to exactly 360.0.
    if wrapped >= FULL_TURN:
        return 0.0
    return wrapped


def shortest_angular_difference(current: float, target: float) -> float:
    """Return the signed turn from ``current`` to ``target`` in ``[-180, 180]``."""

    diff = normalize_degrees(target) - normalize_degrees(current)
    if diff > HALF_TURN:
        diff -= FULL_TURN
    elif diff < -HALF_TURN:
        diff += FULL_TURN
    return diff


def smooth_angle(current: float, target: float, factor: float) -> float:
    """Move ``current`` towards ``target`` by ``factor`` along the short arc.

    Linear interpolation on raw values is wrong near north: going from 350° to
    10° must turn +20°, not -340°. ``factor`` of 1.0 jumps straight to the
    target; smaller factors respond more slowly.
    """

    if not 0.0 < factor <= 1.0:
        raise ValueError("factor must be in the range (0.0, 1.0]")
    diff = shortest_angular_difference(current, target)
    return normalize_degrees(current + diff * factor)


def cardinal_direction(heading: float) -> str:
    """Return the eight-point compass label closest to ``heading``."""

    index = math.floor(normalize_degrees(heading) / _SECTOR_DEGREES + 0.5)
    return CARDINAL_DIRECTIONS[index % len(CARDINAL_DIRECTIONS)]
