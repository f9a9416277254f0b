"""Host adapter and command line for the spirograph curve generator."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import localisation
import spirograph_math as sm
from spirograph_geometry import DEFAULT_STEP, INSIDE, OUTSIDE, CurveResult
from spirograph_params import DrawingParams, PenConfig, from_query, preset, preset_names

BACKEND_ENV_VAR = "SPIROGRAPH_MATH_BACKEND"

_LOGGER = logging.getLogger(__name__)


def _coerce_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise sm.InvalidParameter(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise sm.InvalidParameter(f"{name} must be a number, got {value!r}") from None


def _coerce_inside(value: Any) -> bool:
    if isinstance(value, str):
        cleaned = value.strip().lower()
        if cleaned in ("true", "1", "inside"):
            return True
        if cleaned in ("false", "0", "outside", ""):
            return False
        raise sm.InvalidParameter(f"inside must be a boolean, got {value!r}")
    return bool(value)


def build_request(
    ring_radius: Any,
    wheel_radius: Any,
    pen_offsets: Iterable[Any],
    inside: Any,
) -> sm.CurveRequest:
    """Convertit les arguments de l'hôte en ``CurveRequest``."""
    if isinstance(pen_offsets, (str, bytes)) or not hasattr(pen_offsets, "__iter__"):
        raise sm.InvalidParameter(f"pen offsets must be a sequence, got {pen_offsets!r}")
    return sm.CurveRequest(
        ring_radius=_coerce_number("ring_radius", ring_radius),
        wheel_radius=_coerce_number("wheel_radius", wheel_radius),
        pen_offsets=[_coerce_number(f"pen_offsets[{i}]", d) for i, d in enumerate(pen_offsets)],
        mode=INSIDE if _coerce_inside(inside) else OUTSIDE,
    )


def curve_to_host(result: CurveResult) -> List[List[Dict[str, float]]]:
    return [[{"x": p.x, "y": p.y} for p in trace] for trace in result]


def spirograph(
    ring_radius: Any,
    wheel_radius: Any,
    pen_offsets: Iterable[Any],
    inside: Any,
    **kwargs,
) -> List[List[Dict[str, float]]]:
    """
    Point d'entrée hôte : (R, r, [d...], inside) -> [[{"x", "y"}, ...], ...].
    """
    request = build_request(ring_radius, wheel_radius, pen_offsets, inside)
    return curve_to_host(sm.generate(request, **kwargs))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="spirograph",
        description="Generate spirograph (hypotrochoid/epitrochoid) point sets as JSON.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", choices=preset_names(), help="Start from a named preset.")
    source.add_argument("--query", help="Start from a share link or its query string.")
    parser.add_argument("-R", "--ring", type=float, help="Fixed ring radius.")
    parser.add_argument("-r", "--wheel", type=float, help="Rolling wheel radius.")
    parser.add_argument(
        "-d",
        "--pen",
        type=float,
        action="append",
        help="Pen offset from the wheel center (repeat for several pens).",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--inside", dest="inside", action="store_true", default=None)
    mode.add_argument("--outside", dest="inside", action="store_false")
    parser.add_argument("--step", type=float, default=DEFAULT_STEP, help="Parameter increment in radians.")
    parser.add_argument("--max-samples", type=int, default=sm.MAX_SAMPLES, help="Upper bound of samples per pen.")
    parser.add_argument(
        "--backend",
        default=os.environ.get(BACKEND_ENV_VAR, "python"),
        help=f"Math backend (defaults to ${BACKEND_ENV_VAR} or 'python').",
    )
    parser.add_argument("--list-presets", action="store_true", help="List presets and exit.")
    parser.add_argument("--list-backends", action="store_true", help="List math backends and exit.")
    parser.add_argument("--list-languages", action="store_true", help="List label languages and exit.")
    parser.add_argument("--lang", default="en", help="Language for listings.")
    parser.add_argument("-o", "--output", type=Path, help="Write JSON to this file instead of stdout.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser.parse_args(argv)


def params_from_args(args: argparse.Namespace) -> DrawingParams:
    if args.preset:
        params = preset(args.preset)
    elif args.query:
        params = from_query(args.query)
    else:
        params = DrawingParams()
    if args.ring is not None:
        params.ring_radius = args.ring
    if args.wheel is not None:
        params.wheel_radius = args.wheel
    if args.pen:
        colors = params.pen_colors
        params.pens = [
            PenConfig(d, colors[i] if i < len(colors) else colors[-1]) for i, d in enumerate(args.pen)
        ]
    if args.inside is not None:
        params.inside = args.inside
    return params


def _print_presets(lang: str) -> None:
    print(localisation.tr(lang, "presets_heading"))
    for name in preset_names():
        params = preset(name)
        print(
            f"  {name:<18} {localisation.preset_label(name, lang)} "
            f"(R={params.ring_radius:g}, r={params.wheel_radius:g}, "
            f"d={params.pen_offsets[0]:g}, {localisation.mode_label(params.mode, lang)})"
        )


def _print_backends(lang: str) -> None:
    print(localisation.tr(lang, "backends_heading"))
    for backend in sm.list_backends():
        suffix = "" if backend.available else f" ({localisation.tr(lang, 'backend_unavailable')})"
        print(f"  {backend.name:<8} {backend.label}{suffix}")


def _print_languages() -> None:
    for code in localisation.available_languages():
        print(f"  {code:<8} {localisation.language_display_name(code)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    lang = localisation.resolve_language(args.lang)
    if localisation.language_base(args.lang) not in localisation.available_languages():
        _LOGGER.warning("No labels for language %r, using %s", args.lang, lang)

    if args.list_presets:
        _print_presets(lang)
        return 0
    if args.list_backends:
        _print_backends(lang)
        return 0
    if args.list_languages:
        _print_languages()
        return 0

    try:
        params = params_from_args(args)
        result = sm.generate(
            params.to_request(),
            step=args.step,
            max_samples=args.max_samples,
            backend=args.backend,
        )
    except sm.SpirographError as exc:
        print(f"{localisation.tr(lang, 'error_prefix')}: {exc}", file=sys.stderr)
        return 2

    payload = {
        "ring_radius": params.ring_radius,
        "wheel_radius": params.wheel_radius,
        "mode": params.mode,
        "pens": [
            {"offset": pen.offset, "color": pen.color, "points": points}
            for pen, points in zip(params.pens, curve_to_host(result))
        ],
    }
    text = json.dumps(payload)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        _LOGGER.info("Wrote %d pen traces to %s", len(result), args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
