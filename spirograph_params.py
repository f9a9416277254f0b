from __future__ import annotations

import copy
from dataclasses import dataclass, field
import math
import re
from typing import Dict, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from matplotlib import colors as mcolors

from spirograph_geometry import INSIDE, OUTSIDE
from spirograph_math import CurveRequest, InvalidParameter

DEFAULT_RING_RADIUS = 200.0
DEFAULT_WHEEL_RADIUS = 120.0
DEFAULT_PEN_OFFSET = 80.0
DEFAULT_PEN_COLOR = "#007bff"
NEW_PEN_COLOR = "#ffc107"
DEFAULT_SPEED = 10.0
DEFAULT_LINE_WIDTH = 2.0

# nombre en tête de chaîne, comme parseFloat : "12px" -> 12
_LEADING_NUM_RE = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


def normalize_color(value: str) -> str:
    """
    Normalise une couleur (nom CSS/matplotlib ou hexadécimal) en #rrggbb.
    """
    text = (value or "").strip()
    if not mcolors.is_color_like(text):
        raise InvalidParameter(f"Unknown pen color: {value!r}")
    return mcolors.to_hex(text, keep_alpha=False)


@dataclass
class PenConfig:
    offset: float = DEFAULT_PEN_OFFSET
    color: str = DEFAULT_PEN_COLOR

    def __post_init__(self) -> None:
        try:
            self.offset = float(self.offset)
        except (TypeError, ValueError):
            raise InvalidParameter(f"Pen offset must be a number, got {self.offset!r}") from None
        self.color = normalize_color(self.color)


@dataclass
class DrawingParams:
    ring_radius: float = DEFAULT_RING_RADIUS
    wheel_radius: float = DEFAULT_WHEEL_RADIUS
    pens: List[PenConfig] = field(default_factory=lambda: [PenConfig()])
    inside: bool = False
    speed: float = DEFAULT_SPEED            # ms entre deux segments, pour l'affichage
    line_width: float = DEFAULT_LINE_WIDTH

    @property
    def mode(self) -> str:
        return INSIDE if self.inside else OUTSIDE

    @property
    def pen_offsets(self) -> List[float]:
        return [pen.offset for pen in self.pens]

    @property
    def pen_colors(self) -> List[str]:
        return [pen.color for pen in self.pens]

    def to_request(self) -> CurveRequest:
        return CurveRequest(
            ring_radius=float(self.ring_radius),
            wheel_radius=float(self.wheel_radius),
            pen_offsets=self.pen_offsets,
            mode=self.mode,
        )

    def add_pen(self, offset: float = 0.0, color: str = NEW_PEN_COLOR) -> PenConfig:
        pen = PenConfig(offset, color)
        self.pens.append(pen)
        return pen

    def remove_pen(self, index: int) -> None:
        """Retire un stylo ; le dernier stylo restant est conservé."""
        if len(self.pens) <= 1:
            return
        del self.pens[index]


_PRESETS: Dict[str, DrawingParams] = {
    "classicFlower": DrawingParams(200, 120, [PenConfig(100, "#e74c3c")], inside=True),
    "starburst": DrawingParams(160, 40, [PenConfig(80, "#f1c40f")], inside=True),
    "rosette": DrawingParams(240, 100, [PenConfig(120, "#3498db")], inside=False),
    "toroidalDonut": DrawingParams(240, 200, [PenConfig(100, "#9b59b6")], inside=True),
    "complexRosette": DrawingParams(210, 120, [PenConfig(150, "#e67e22")], inside=True),
    "fineLineFlower": DrawingParams(200, 160, [PenConfig(180, "#1abc9c")], inside=True),
    "simpleEpicycloid": DrawingParams(180, 60, [PenConfig(60, "#34495e")], inside=False),
}


def preset_names() -> List[str]:
    return list(_PRESETS)


def preset(name: str) -> DrawingParams:
    params = _PRESETS.get(name)
    if params is None:
        raise InvalidParameter(f"Unknown preset: {name}")
    return copy.deepcopy(params)


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_query(params: DrawingParams) -> str:
    return urlencode(
        {
            "R": _format_number(params.ring_radius),
            "r": _format_number(params.wheel_radius),
            "d": ",".join(_format_number(d) for d in params.pen_offsets),
            "colors": ",".join(params.pen_colors),
            "inside": "true" if params.inside else "false",
            "speed": _format_number(params.speed),
            "lineWidth": _format_number(params.line_width),
        }
    )


def _number_or_default(text: Optional[str], default: float) -> float:
    # valeur absente, illisible, nulle ou non finie -> défaut
    if text is None:
        return default
    match = _LEADING_NUM_RE.match(text)
    if match is None:
        return default
    value = float(match.group(1))
    if value == 0 or not math.isfinite(value):
        return default
    return value


def _parse_offsets(text: Optional[str]) -> List[float]:
    if not text:
        return [DEFAULT_PEN_OFFSET]
    offsets = []
    for item in text.split(","):
        try:
            offsets.append(float(item) if item.strip() else 0.0)
        except ValueError:
            raise InvalidParameter(f"Invalid pen offset in share link: {item!r}") from None
    return offsets


def from_query(query: str) -> DrawingParams:
    """
    Relit les paramètres d'un lien de partage (URL complète ou simple
    chaîne de requête ``R=..&r=..&d=..``).
    """
    if "?" in query or "://" in query:
        query = urlsplit(query).query
    values = dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))

    offsets = _parse_offsets(values.get("d"))
    colors = [c for c in values.get("colors", "").split(",") if c.strip()]
    colors += [DEFAULT_PEN_COLOR] * (len(offsets) - len(colors))

    return DrawingParams(
        ring_radius=_number_or_default(values.get("R"), DEFAULT_RING_RADIUS),
        wheel_radius=_number_or_default(values.get("r"), DEFAULT_WHEEL_RADIUS),
        pens=[PenConfig(d, color) for d, color in zip(offsets, colors)],
        inside=values.get("inside") == "true",
        speed=_number_or_default(values.get("speed"), DEFAULT_SPEED),
        line_width=_number_or_default(values.get("lineWidth"), DEFAULT_LINE_WIDTH),
    )


__all__ = [
    "DEFAULT_PEN_COLOR",
    "DrawingParams",
    "NEW_PEN_COLOR",
    "PenConfig",
    "from_query",
    "normalize_color",
    "preset",
    "preset_names",
    "to_query",
]
