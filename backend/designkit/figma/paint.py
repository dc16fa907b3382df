"""Figma paint/effect -> CSS value conversion.

Deterministic conversion of raw design-API paint and effect dicts into
style-language strings:

- solid colors -> ``#rrggbb`` or ``rgba(r, g, b, a)``
- linear / radial / angular gradients -> ``*-gradient(...)``
- drop / inner shadows -> ``box-shadow`` parts
- layer / background blur -> ``filter`` / ``backdrop-filter`` parts

Every function is total: malformed input yields ``None`` (or an empty
result), never an exception.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

_SHADOW_TYPES = frozenset({"DROP_SHADOW", "INNER_SHADOW"})

_GRADIENT_TYPES = frozenset({
    "GRADIENT_LINEAR", "GRADIENT_RADIAL", "GRADIENT_ANGULAR",
})

_DEFAULT_SHADOW_COLOR = "rgba(0, 0, 0, 0.25)"

# Figma blend mode -> CSS mix-blend-mode. NORMAL / PASS_THROUGH map to
# None because they are the CSS default and need no declaration.
_BLEND_MODES: Dict[str, Optional[str]] = {
    "NORMAL": None,
    "PASS_THROUGH": None,
    "MULTIPLY": "multiply",
    "SCREEN": "screen",
    "OVERLAY": "overlay",
    "DARKEN": "darken",
    "LIGHTEN": "lighten",
    "COLOR_DODGE": "color-dodge",
    "COLOR_BURN": "color-burn",
    "HARD_LIGHT": "hard-light",
    "SOFT_LIGHT": "soft-light",
    "DIFFERENCE": "difference",
    "EXCLUSION": "exclusion",
    "HUE": "hue",
    "SATURATION": "saturation",
    "COLOR": "color",
    "LUMINOSITY": "luminosity",
    # No CSS equivalent; closest approximation
    "LINEAR_BURN": "color-burn",
    "LINEAR_DODGE": "color-dodge",
}


# ---------------------------------------------------------------------------
# Number helpers
# ---------------------------------------------------------------------------


def as_number(value: Any, default: float = 0.0) -> float:
    """Coerce a raw JSON value to float, falling back to ``default``."""
    if isinstance(value, bool):
        return default
    if not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` (4.0 -> '4', 2.5 -> '2.5')."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def _channel(color: Mapping[str, Any], key: str) -> int:
    value = max(0.0, min(1.0, as_number(color.get(key), 0.0)))
    return round(value * 255)


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


def color_to_css(color: Any, opacity: float = 1.0) -> Optional[str]:
    """Convert a Figma RGBA float dict {r,g,b,a} to a CSS color string.

    Fully opaque colors become ``#rrggbb``; anything translucent becomes
    ``rgba(r, g, b, a)`` with 0-255 channels and alpha to two decimals.
    ``opacity`` (the paint-level opacity) multiplies the color alpha.
    """
    if not isinstance(color, Mapping):
        return None

    r = _channel(color, "r")
    g = _channel(color, "g")
    b = _channel(color, "b")
    alpha = as_number(color.get("a"), 1.0) * as_number(opacity, 1.0)
    alpha = max(0.0, min(1.0, alpha))

    if alpha < 1.0:
        return f"rgba({r}, {g}, {b}, {alpha:.2f})"
    return f"#{r:02x}{g:02x}{b:02x}"


# ---------------------------------------------------------------------------
# Paints (fills / strokes)
# ---------------------------------------------------------------------------


def is_visible(entry: Any) -> bool:
    """A paint/effect is hidden only when it says ``visible: false``."""
    return isinstance(entry, Mapping) and entry.get("visible", True) is not False


def _gradient_stops(paint: Mapping[str, Any]) -> Optional[str]:
    stops = paint.get("gradientStops")
    if not isinstance(stops, list):
        return None

    parts: List[str] = []
    for stop in stops:
        if not isinstance(stop, Mapping):
            continue
        color = color_to_css(stop.get("color"))
        if color is None:
            continue
        position = round(max(0.0, min(1.0, as_number(stop.get("position"), 0.0))) * 100)
        parts.append(f"{color} {position}%")

    if not parts:
        return None
    return ", ".join(parts)


def gradient_angle(paint: Mapping[str, Any]) -> int:
    """Derive a linear-gradient angle (degrees) from the paint transform.

    Uses ``atan2(b, a)`` on the first transform row plus a 90 degree
    correction; 180 (top-to-bottom) when there is no usable transform.
    """
    transform = paint.get("gradientTransform")
    try:
        a, b = transform[0][0], transform[0][1]
    except (TypeError, IndexError, KeyError):
        return 180
    a = as_number(a, math.nan)
    b = as_number(b, math.nan)
    if math.isnan(a) or math.isnan(b):
        return 180
    return round(math.degrees(math.atan2(b, a)) + 90)


def gradient_to_css(paint: Any) -> Optional[str]:
    """Convert a GRADIENT_* paint to a CSS gradient function."""
    if not isinstance(paint, Mapping):
        return None
    paint_type = paint.get("type")
    if not isinstance(paint_type, str) or paint_type not in _GRADIENT_TYPES:
        return None

    stops = _gradient_stops(paint)
    if stops is None:
        return None

    if paint_type == "GRADIENT_LINEAR":
        return f"linear-gradient({gradient_angle(paint)}deg, {stops})"
    if paint_type == "GRADIENT_RADIAL":
        return f"radial-gradient(circle, {stops})"
    return f"conic-gradient({stops})"


def paint_to_css(paint: Any) -> Optional[str]:
    """Convert one fill/stroke paint to a CSS value.

    Returns None for hidden paints (``visible: false``) and unsupported
    kinds (IMAGE, VIDEO, EMOJI, ...).
    """
    if not is_visible(paint):
        return None

    paint_type = paint.get("type")
    if paint_type == "SOLID":
        return color_to_css(paint.get("color"), as_number(paint.get("opacity"), 1.0))
    if isinstance(paint_type, str) and paint_type in _GRADIENT_TYPES:
        return gradient_to_css(paint)

    logger.debug("Unsupported paint type skipped: %r", paint_type)
    return None


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


def effect_to_css(effect: Any) -> Optional[str]:
    """Convert one effect to its CSS fragment.

    - DROP_SHADOW      -> ``<x>px <y>px <blur>px <spread>px <color>``
    - INNER_SHADOW     -> same, prefixed with ``inset``
    - LAYER_BLUR       -> ``blur(<radius>px)``
    - BACKGROUND_BLUR  -> ``backdrop-blur(<radius>px)``
    """
    if not is_visible(effect):
        return None

    effect_type = effect.get("type")
    if not isinstance(effect_type, str):
        return None
    radius = format_number(as_number(effect.get("radius"), 0.0))

    if effect_type in _SHADOW_TYPES:
        offset = effect.get("offset")
        if not isinstance(offset, Mapping):
            offset = {}
        x = format_number(as_number(offset.get("x"), 0.0))
        y = format_number(as_number(offset.get("y"), 0.0))
        spread = format_number(as_number(effect.get("spread"), 0.0))
        color = color_to_css(effect.get("color")) or _DEFAULT_SHADOW_COLOR
        css = f"{x}px {y}px {radius}px {spread}px {color}"
        if effect_type == "INNER_SHADOW":
            css = f"inset {css}"
        return css

    if effect_type == "LAYER_BLUR":
        return f"blur({radius}px)"
    if effect_type == "BACKGROUND_BLUR":
        return f"backdrop-blur({radius}px)"

    logger.debug("Unsupported effect type skipped: %r", effect_type)
    return None


def effects_to_css(effects: Any) -> Dict[str, str]:
    """Aggregate all visible effects into CSS properties.

    Returns a dict with any of ``box_shadow`` (shadows joined with ", "),
    ``filter`` and ``backdrop_filter`` (blurs joined with a space). A key
    is present only when at least one visible effect contributes to it.
    """
    if not isinstance(effects, list):
        return {}

    shadows: List[str] = []
    filters: List[str] = []
    backdrop_filters: List[str] = []

    for effect in effects:
        css = effect_to_css(effect)
        if not css:
            continue
        effect_type = effect.get("type")
        if effect_type in _SHADOW_TYPES:
            shadows.append(css)
        elif effect_type == "LAYER_BLUR":
            filters.append(css)
        elif effect_type == "BACKGROUND_BLUR":
            backdrop_filters.append(css)

    result: Dict[str, str] = {}
    if shadows:
        result["box_shadow"] = ", ".join(shadows)
    if filters:
        result["filter"] = " ".join(filters)
    if backdrop_filters:
        result["backdrop_filter"] = " ".join(backdrop_filters)
    return result


def blend_mode_to_css(blend_mode: Any) -> Optional[str]:
    """Map a Figma blend mode to a CSS mix-blend-mode, None if default/unknown."""
    if not isinstance(blend_mode, str):
        return None
    if blend_mode not in _BLEND_MODES:
        logger.debug("Unknown blend mode ignored: %r", blend_mode)
    return _BLEND_MODES.get(blend_mode)
