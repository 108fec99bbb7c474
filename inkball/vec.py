"""2D vector math helpers operating on tuple[float, float]."""
from __future__ import annotations

import math

Vec = tuple[float, float]


def add(a: Vec, b: Vec) -> Vec:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec, s: float) -> Vec:
    return (v[0] * s, v[1] * s)


def dot(a: Vec, b: Vec) -> float:
    return a[0] * b[0] + a[1] * b[1]


def magnitude(v: Vec) -> float:
    return math.hypot(v[0], v[1])


def distance(a: Vec, b: Vec) -> float:
    return magnitude(sub(a, b))


def midpoint(a: Vec, b: Vec) -> Vec:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def unit_normals(p1: Vec, p2: Vec) -> tuple[Vec, Vec]:
    """Both unit normals of the segment p1→p2, left-hand normal first.

    A zero-length segment has no direction; both normals come back as the
    zero vector so callers see them as equidistant.
    """
    dx, dy = sub(p2, p1)
    length = math.hypot(dx, dy)
    if length == 0.0:
        return (0.0, 0.0), (0.0, 0.0)
    return (-dy / length, dx / length), (dy / length, -dx / length)


def reflect(v: Vec, n: Vec) -> Vec:
    """Mirror v about the line whose unit normal is n: v - 2 (v·n) n."""
    return sub(v, scale(n, 2.0 * dot(v, n)))
