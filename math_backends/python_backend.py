from __future__ import annotations

import spirograph_geometry as sg
from spirograph_geometry import PenTrace, Point


def generate_pen_trace(
    ring_radius: float,
    wheel_radius: float,
    pen_offset: float,
    mode: str,
    count: int,
    step: float = sg.DEFAULT_STEP,
) -> PenTrace:
    """
    Échantillonne la courbe d'un stylo pour t = i * step, i dans [0, count).
    """
    R = float(ring_radius)
    r = float(wheel_radius)
    d = float(pen_offset)

    points: PenTrace = []
    for i in range(count):
        x, y = sg.trochoid_point(i * step, R, r, d, mode)
        points.append(Point(x, y))
    return points
