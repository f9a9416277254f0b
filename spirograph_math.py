from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Callable, List, Optional, Sequence

import spirograph_geometry as sg
from math_backends import numba_backend, python_backend
from spirograph_geometry import (
    DEFAULT_STEP,
    INSIDE,
    MODES,
    OUTSIDE,
    CurvePeriod,
    CurveResult,
    PenTrace,
    Point,
    curve_period,
    sample_count,
)

MAX_SAMPLES = 2_000_000

_LOGGER = logging.getLogger(__name__)


class SpirographError(ValueError):
    pass


class InvalidParameter(SpirographError):
    pass


class DegenerateResult(SpirographError):
    pass


@dataclass(frozen=True)
class MathBackend:
    name: str
    label: str
    available: bool
    generator: Callable


_BACKENDS: dict[str, MathBackend] = {}
_ACTIVE_BACKEND = "python"


def register_backend(backend: MathBackend) -> None:
    _BACKENDS[backend.name] = backend


def list_backends(*, available_only: bool = False) -> list[MathBackend]:
    backends = list(_BACKENDS.values())
    if available_only:
        backends = [b for b in backends if b.available]
    return sorted(backends, key=lambda b: b.name)


def get_backend_name() -> str:
    return _ACTIVE_BACKEND


def _resolve_backend(name: str) -> MathBackend:
    backend = _BACKENDS.get(name)
    if backend is None:
        raise InvalidParameter(f"Unknown math backend: {name}")
    if not backend.available:
        raise InvalidParameter(f"Math backend not available: {name}")
    return backend


def set_backend(name: str) -> None:
    backend = _resolve_backend(name)
    global _ACTIVE_BACKEND
    _ACTIVE_BACKEND = backend.name


@dataclass
class CurveRequest:
    ring_radius: float = 200.0
    wheel_radius: float = 120.0
    pen_offsets: List[float] = field(default_factory=list)
    mode: str = INSIDE          # inside (hypotrochoïde) / outside (épitrochoïde)


def _check_radius(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value!r}")
    if value <= 0:
        raise InvalidParameter(f"{name} must be positive, got {value!r}")


def validate_request(request: CurveRequest, step: float = DEFAULT_STEP) -> None:
    """
    Vérifie la requête avant tout échantillonnage.

    Rayons nuls ou négatifs, valeurs non finies (y compris R ± r et
    (R ± r) / r), mode inconnu ou pas invalide : ``InvalidParameter``.
    Aucun résultat partiel n'est produit.
    """
    _check_radius("ring_radius", request.ring_radius)
    _check_radius("wheel_radius", request.wheel_radius)
    for index, offset in enumerate(request.pen_offsets):
        if not math.isfinite(offset):
            raise InvalidParameter(f"pen_offsets[{index}] must be finite, got {offset!r}")
    if request.mode not in MODES:
        raise InvalidParameter(f"mode must be one of {', '.join(MODES)}, got {request.mode!r}")
    center, k = sg.rolling_terms(request.ring_radius, request.wheel_radius, request.mode)
    if not (math.isfinite(center) and math.isfinite(k)):
        raise InvalidParameter(
            f"ring_radius={request.ring_radius!r} and wheel_radius={request.wheel_radius!r} "
            f"overflow the {request.mode} rolling terms"
        )
    if not math.isfinite(step) or step <= 0:
        raise InvalidParameter(f"step must be a positive number, got {step!r}")


def request_period(
    request: CurveRequest,
    step: float = DEFAULT_STEP,
    max_samples: int = MAX_SAMPLES,
) -> CurvePeriod:
    """
    Période de la courbe, bornée à ``max_samples`` échantillons par stylo.
    """
    period = curve_period(request.ring_radius, request.wheel_radius)
    # floor(end_t / step) + 1 <= max_samples, sans passer par floor(inf)
    if period.end_t / step < max_samples:
        return period
    end_t = (max_samples - 1) * step
    _LOGGER.warning(
        "Curve R=%s r=%s needs %.6g revolutions; truncating to %d samples per pen",
        request.ring_radius,
        request.wheel_radius,
        period.revolutions,
        max_samples,
    )
    return CurvePeriod(period.gcd, period.lcm, period.revolutions, end_t, truncated=True)


def generate(
    request: CurveRequest,
    *,
    step: float = DEFAULT_STEP,
    max_samples: int = MAX_SAMPLES,
    backend: Optional[str] = None,
) -> CurveResult:
    """
    Génère une trace par stylo, dans l'ordre de ``request.pen_offsets``.
    """
    validate_request(request, step)
    if max_samples < 1:
        raise InvalidParameter(f"max_samples must be at least 1, got {max_samples!r}")
    math_backend = _resolve_backend(backend or _ACTIVE_BACKEND)

    period = request_period(request, step, max_samples)
    # tronquée : end_t est le t du dernier échantillon, floor() pourrait en perdre un
    count = max_samples if period.truncated else sample_count(period.end_t, step)
    _LOGGER.debug(
        "R=%s r=%s gcd=%s revolutions=%s end_t=%s samples=%d backend=%s",
        request.ring_radius,
        request.wheel_radius,
        period.gcd,
        period.revolutions,
        period.end_t,
        count,
        math_backend.name,
    )

    result: CurveResult = []
    for index, offset in enumerate(request.pen_offsets):
        try:
            trace = math_backend.generator(
                request.ring_radius,
                request.wheel_radius,
                offset,
                request.mode,
                count,
                step,
            )
        except (ValueError, OverflowError) as exc:
            # math.cos(inf) : k * t a débordé en cours de balayage
            raise DegenerateResult(
                f"Trace {index} left the float range (R={request.ring_radius}, "
                f"r={request.wheel_radius}, d={offset}): {exc}"
            ) from exc
        if not sg.is_finite_trace(trace):
            raise DegenerateResult(
                f"Non-finite point in trace {index} (R={request.ring_radius}, "
                f"r={request.wheel_radius}, d={offset})"
            )
        result.append(trace)
    return result


def generate_points(
    ring_radius: float,
    wheel_radius: float,
    pen_offsets: Sequence[float],
    inside: bool = True,
    **kwargs,
) -> CurveResult:
    request = CurveRequest(
        ring_radius=ring_radius,
        wheel_radius=wheel_radius,
        pen_offsets=list(pen_offsets),
        mode=INSIDE if inside else OUTSIDE,
    )
    return generate(request, **kwargs)


register_backend(
    MathBackend(
        name="python",
        label="Python",
        available=True,
        generator=python_backend.generate_pen_trace,
    )
)
register_backend(
    MathBackend(
        name="numba",
        label="Numba",
        available=numba_backend.NUMBA_AVAILABLE,
        generator=numba_backend.generate_pen_trace,
    )
)


__all__ = [
    "CurvePeriod",
    "CurveRequest",
    "CurveResult",
    "DEFAULT_STEP",
    "DegenerateResult",
    "INSIDE",
    "InvalidParameter",
    "MAX_SAMPLES",
    "MathBackend",
    "OUTSIDE",
    "PenTrace",
    "Point",
    "SpirographError",
    "generate",
    "generate_points",
    "get_backend_name",
    "list_backends",
    "register_backend",
    "request_period",
    "set_backend",
    "validate_request",
]
