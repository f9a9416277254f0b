from __future__ import annotations

from dataclasses import dataclass
import math
from typing import List, Tuple

INSIDE = "inside"    # hypotrochoïde : la roue tourne dans l'anneau
OUTSIDE = "outside"  # épitrochoïde : la roue tourne autour de l'anneau
MODES = (INSIDE, OUTSIDE)

DEFAULT_STEP = 0.01
GCD_RELATIVE_TOLERANCE = 1e-9
GCD_MAX_ITERATIONS = 200


@dataclass(frozen=True)
class Point:
    x: float
    y: float


PenTrace = List[Point]
CurveResult = List[PenTrace]


@dataclass(frozen=True)
class CurvePeriod:
    gcd: float
    lcm: float
    revolutions: float
    end_t: float
    truncated: bool = False


def real_gcd(
    a: float,
    b: float,
    *,
    tolerance: float | None = None,
    max_iterations: int = GCD_MAX_ITERATIONS,
) -> float:
    """
    Algorithme d'Euclide sur des réels (réductions successives par modulo).

    La boucle s'arrête quand le reste tombe à zéro, ou sous ``tolerance``
    (par défaut 1e-9 fois le plus petit des deux nombres), ou après
    ``max_iterations`` réductions. Pour des rapports incommensurables le
    reste n'atteint jamais zéro : le résultat est alors un petit commun
    diviseur approché.
    """
    a = abs(float(a))
    b = abs(float(b))
    if tolerance is None:
        # relative au plus petit : un pgcd ne dépasse jamais min(a, b)
        tolerance = GCD_RELATIVE_TOLERANCE * min(a, b)
    iterations = 0
    while b > tolerance and iterations < max_iterations:
        a, b = b, math.fmod(a, b)
        iterations += 1
    return a


def real_lcm(a: float, b: float, *, gcd: float | None = None) -> float:
    if gcd is None:
        gcd = real_gcd(a, b)
    # a * b / pgcd, divisé avant de multiplier pour éviter le dépassement
    return (a / gcd) * b


def curve_period(ring_radius: float, wheel_radius: float) -> CurvePeriod:
    """
    Nombre de tours nécessaires pour que la courbe se referme :
    ppcm(R, r) / R, et borne du paramètre 2π * tours.
    """
    g = real_gcd(ring_radius, wheel_radius)
    lcm = real_lcm(ring_radius, wheel_radius, gcd=g)
    revolutions = lcm / ring_radius
    return CurvePeriod(g, lcm, revolutions, 2.0 * math.pi * revolutions)


def sample_count(end_t: float, step: float = DEFAULT_STEP) -> int:
    # t_i = i * step pour i in range(n), borne end_t incluse
    return int(math.floor(end_t / step)) + 1


def rolling_terms(R: float, r: float, mode: str) -> Tuple[float, float]:
    """
    Distance centre-à-centre (R - r dedans, R + r dehors) et rapport de
    rotation de la roue (distance / r).
    """
    center = R - r if mode == INSIDE else R + r
    return center, center / r


def hypotrochoid_point(t: float, R: float, r: float, d: float) -> Tuple[float, float]:
    center, k = rolling_terms(R, r, INSIDE)
    x = center * math.cos(t) + d * math.cos(k * t)
    y = center * math.sin(t) - d * math.sin(k * t)
    return x, y


def epitrochoid_point(t: float, R: float, r: float, d: float) -> Tuple[float, float]:
    center, k = rolling_terms(R, r, OUTSIDE)
    x = center * math.cos(t) - d * math.cos(k * t)
    y = center * math.sin(t) - d * math.sin(k * t)
    return x, y


def trochoid_point(t: float, R: float, r: float, d: float, mode: str) -> Tuple[float, float]:
    if mode == INSIDE:
        return hypotrochoid_point(t, R, r, d)
    return epitrochoid_point(t, R, r, d)


def is_finite_trace(trace: PenTrace) -> bool:
    return all(math.isfinite(p.x) and math.isfinite(p.y) for p in trace)


__all__ = [
    "CurvePeriod",
    "CurveResult",
    "DEFAULT_STEP",
    "GCD_MAX_ITERATIONS",
    "GCD_RELATIVE_TOLERANCE",
    "INSIDE",
    "MODES",
    "OUTSIDE",
    "PenTrace",
    "Point",
    "curve_period",
    "epitrochoid_point",
    "hypotrochoid_point",
    "is_finite_trace",
    "real_gcd",
    "real_lcm",
    "rolling_terms",
    "sample_count",
    "trochoid_point",
]
