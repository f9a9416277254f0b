from __future__ import annotations

import importlib.util
import logging

import spirograph_geometry as sg
from math_backends import python_backend
from spirograph_geometry import PenTrace, Point

NUMBA_AVAILABLE = importlib.util.find_spec("numba") is not None
if NUMBA_AVAILABLE:
    import numba
    import numpy as np

_LOGGER = logging.getLogger(__name__)


if NUMBA_AVAILABLE:

    @numba.njit(cache=True)
    def _trochoid_points_numba(
        t_values: np.ndarray,
        center: float,
        k: float,
        d: float,
        sign: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        n = len(t_values)
        out_x = np.empty(n, dtype=np.float64)
        out_y = np.empty(n, dtype=np.float64)
        for i in range(n):
            t = t_values[i]
            out_x[i] = center * np.cos(t) + sign * d * np.cos(k * t)
            out_y[i] = center * np.sin(t) - d * np.sin(k * t)
        return out_x, out_y


def generate_pen_trace(
    ring_radius: float,
    wheel_radius: float,
    pen_offset: float,
    mode: str,
    count: int,
    step: float = sg.DEFAULT_STEP,
) -> PenTrace:
    if not NUMBA_AVAILABLE:
        _LOGGER.debug("numba not installed, using the python backend")
        return python_backend.generate_pen_trace(
            ring_radius,
            wheel_radius,
            pen_offset,
            mode,
            count,
            step,
        )

    center, k = sg.rolling_terms(float(ring_radius), float(wheel_radius), mode)
    sign = 1.0 if mode == sg.INSIDE else -1.0

    # même t_i = i * step que le backend python, pas de linspace
    t_values = np.arange(count, dtype=np.float64) * step
    px, py = _trochoid_points_numba(t_values, center, k, float(pen_offset), sign)
    return [Point(float(x), float(y)) for x, y in zip(px, py)]
