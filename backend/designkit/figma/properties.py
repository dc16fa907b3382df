"""Figma node -> property bag extraction.

Walks ONE design node (not its subtree) and produces a flat, style-oriented
description of it: dimensions, auto-layout, primary fill and stroke, all
visible effects, corner radius, opacity, blend mode, typography (TEXT nodes
only), variant axes (COMPONENT_SET nodes only) and component property
definitions.

Upstream design data is routinely incomplete, so extraction never raises:
absent or malformed fields degrade to 0, an empty container, or an omitted
key.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import DesignNode
from .paint import (
    as_number,
    blend_mode_to_css,
    effects_to_css,
    is_visible,
    paint_to_css,
)

logger = logging.getLogger(__name__)

_DIRECTIONS = {"HORIZONTAL": "row", "VERTICAL": "column"}

_ALIGNMENTS = {
    "MIN": "flex-start",
    "CENTER": "center",
    "MAX": "flex-end",
    "SPACE_BETWEEN": "space-between",
}

_DEFAULT_ALIGNMENT = "flex-start"


def _as_raw(node: Any) -> Mapping[str, Any]:
    if isinstance(node, DesignNode):
        return node.to_raw()
    if isinstance(node, Mapping):
        return node
    logger.debug("Expected a node mapping, got %s", type(node).__name__)
    return {}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _lookup(table: Mapping[str, Any], key: Any, default: Any = None) -> Any:
    # Raw values may be unhashable (lists/dicts) in malformed payloads
    if not isinstance(key, str):
        return default
    return table.get(key, default)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def node_bounds(node: Mapping[str, Any]) -> Dict[str, float]:
    """Bounding box of a node, every field defaulting to 0."""
    bbox = _mapping(node.get("absoluteBoundingBox"))
    return {
        "x": as_number(bbox.get("x")),
        "y": as_number(bbox.get("y")),
        "width": as_number(bbox.get("width")),
        "height": as_number(bbox.get("height")),
    }


def corner_radius(node: Mapping[str, Any]) -> Union[float, List[float]]:
    """Per-corner [tl, tr, br, bl] radii when present, else the scalar radius."""
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list) and len(radii) == 4:
        values = [as_number(r, math.nan) for r in radii]
        if not any(math.isnan(v) for v in values):
            return values
    return as_number(node.get("cornerRadius"))


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def auto_layout(node: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Flex parameters of an auto-layout frame; None when layout mode is NONE."""
    direction = _lookup(_DIRECTIONS, node.get("layoutMode"))
    if direction is None:
        return None

    layout: Dict[str, Any] = {
        "mode": node["layoutMode"],
        "direction": direction,
        "justify_content": _lookup(
            _ALIGNMENTS, node.get("primaryAxisAlignItems"), _DEFAULT_ALIGNMENT
        ),
        "align_items": _lookup(
            _ALIGNMENTS, node.get("counterAxisAlignItems"), _DEFAULT_ALIGNMENT
        ),
        "gap": as_number(node.get("itemSpacing")),
        "padding": {
            "top": as_number(node.get("paddingTop")),
            "right": as_number(node.get("paddingRight")),
            "bottom": as_number(node.get("paddingBottom")),
            "left": as_number(node.get("paddingLeft")),
        },
    }
    if node.get("layoutWrap") == "WRAP":
        layout["wrap"] = True
    return layout


# ---------------------------------------------------------------------------
# Paints
# ---------------------------------------------------------------------------


def _paint_entries(paints: Any) -> List[Dict[str, Any]]:
    """Visible, convertible paints as {"type", "css"[, "opacity"]} entries."""
    if not isinstance(paints, list):
        return []

    entries = []
    for paint in paints:
        if not is_visible(paint):
            continue
        css = paint_to_css(paint)
        if css is None:
            continue
        entry: Dict[str, Any] = {
            "type": "solid" if paint.get("type") == "SOLID" else "gradient",
            "css": css,
        }
        if "opacity" in paint:
            entry["opacity"] = as_number(paint.get("opacity"), 1.0)
        entries.append(entry)
    return entries


def primary_border(node: Mapping[str, Any], strokes: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Border from the first visible stroke, None when there is none."""
    if not strokes:
        return None
    border: Dict[str, Any] = {
        "color": strokes[0]["css"],
        "width": as_number(node.get("strokeWeight"), 1.0),
    }
    align = node.get("strokeAlign")
    if isinstance(align, str) and align:
        border["align"] = align.lower()
    return border


# ---------------------------------------------------------------------------
# Text / components / variables
# ---------------------------------------------------------------------------


def text_typography(node: Mapping[str, Any]) -> Dict[str, Any]:
    """Typography of a TEXT node (only the fields the style declares)."""
    style = _mapping(node.get("style"))
    # Fallback: some exports use "typeStyle" instead of "style"
    if not style.get("fontFamily"):
        style = _mapping(node.get("typeStyle")) or style

    typography: Dict[str, Any] = {}
    if isinstance(style.get("fontFamily"), str):
        typography["font_family"] = style["fontFamily"]
    for source, target in (
        ("fontSize", "font_size"),
        ("fontWeight", "font_weight"),
        ("lineHeightPx", "line_height"),
        ("letterSpacing", "letter_spacing"),
    ):
        value = style.get(source)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            typography[target] = value
    for source, target in (
        ("textAlignHorizontal", "text_align"),
        ("textDecoration", "text_decoration"),
    ):
        value = style.get(source)
        if isinstance(value, str) and value:
            typography[target] = value.lower()
    return typography


def variant_axes(node: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Variants of a COMPONENT_SET, one entry per child; [] for other nodes."""
    if node.get("type") != "COMPONENT_SET":
        return []
    children = node.get("children")
    if not isinstance(children, list):
        return []

    variants = []
    for child in children:
        if not isinstance(child, Mapping):
            continue
        properties = _mapping(child.get("variantProperties"))
        variants.append({
            "name": _text(child.get("name")),
            "properties": {
                str(k): str(v) for k, v in properties.items() if v is not None
            },
        })
    return variants


def component_properties(node: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Component property definitions keyed by property name."""
    definitions = _mapping(node.get("componentPropertyDefinitions"))
    result: Dict[str, Dict[str, Any]] = {}
    for name, definition in definitions.items():
        if not isinstance(definition, Mapping):
            continue
        entry: Dict[str, Any] = {"type": _text(definition.get("type"))}
        options = definition.get("variantOptions")
        if isinstance(options, list):
            entry["options"] = [str(o) for o in options]
        if "defaultValue" in definition:
            entry["default_value"] = definition["defaultValue"]
        result[str(name)] = entry
    return result


def _alias_ids(value: Any) -> List[str]:
    """Collect VARIABLE_ALIAS ids from a boundVariables entry (any nesting)."""
    if isinstance(value, Mapping):
        if value.get("type") == "VARIABLE_ALIAS" and isinstance(value.get("id"), str):
            return [value["id"]]
        ids: List[str] = []
        for nested in value.values():
            ids.extend(_alias_ids(nested))
        return ids
    if isinstance(value, list):
        ids = []
        for item in value:
            ids.extend(_alias_ids(item))
        return ids
    return []


def bound_variables(node: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Property name -> ids of the design variables bound to it."""
    result: Dict[str, List[str]] = {}
    for prop, value in _mapping(node.get("boundVariables")).items():
        ids = _alias_ids(value)
        if ids:
            result[str(prop)] = ids
    return result


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def extract_node_properties(node: Union[DesignNode, Mapping[str, Any], None]) -> Dict[str, Any]:
    """Extract the property bag of a single design node.

    Keys always present: id, name, type, position, dimensions, fills,
    strokes, corner_radius, opacity, bound_variables, variants,
    component_properties.

    Keys present only when applicable: background (first visible fill),
    border (first visible stroke), layout (auto-layout frames), effects
    (at least one visible effect), blend_mode (non-default), typography
    (TEXT nodes).
    """
    raw = _as_raw(node)
    bounds = node_bounds(raw)
    fills = _paint_entries(raw.get("fills"))
    strokes = _paint_entries(raw.get("strokes"))

    props: Dict[str, Any] = {
        "id": _text(raw.get("id")),
        "name": _text(raw.get("name")),
        "type": _text(raw.get("type")),
        "position": {"x": bounds["x"], "y": bounds["y"]},
        "dimensions": {"width": bounds["width"], "height": bounds["height"]},
        "fills": fills,
        "strokes": strokes,
        "corner_radius": corner_radius(raw),
        "opacity": as_number(raw.get("opacity"), 1.0),
        "bound_variables": bound_variables(raw),
        "variants": variant_axes(raw),
        "component_properties": component_properties(raw),
    }

    if fills:
        props["background"] = fills[0]["css"]

    border = primary_border(raw, strokes)
    if border:
        props["border"] = border

    layout = auto_layout(raw)
    if layout:
        props["layout"] = layout

    effects = effects_to_css(raw.get("effects"))
    if effects:
        props["effects"] = effects

    blend = blend_mode_to_css(raw.get("blendMode"))
    if blend:
        props["blend_mode"] = blend

    if raw.get("type") == "TEXT":
        props["typography"] = text_typography(raw)

    return props
