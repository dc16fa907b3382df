"""Token file parsing — uploaded JSON token files -> ProjectToken list.

Three layouts are auto-detected:

- design-tool variables export: ``{"modes": {...}, "variables": [...]}``
- flat tokens: ``{"tokens": {"name": "value", ...}}``
- generic nested JSON, including DTCG ``{"$value": ...}`` leaves

Token types are inferred from variable scopes first, then the name, then
the value; anything unrecognised is ``"unknown"``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..figma.paint import color_to_css
from .models import ProjectToken

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
_FUNC_COLOR_RE = re.compile(r"^(rgba?|hsla?)\(")
_DIMENSION_RE = re.compile(r"^\d+(\.\d+)?(px|rem|em|pt)$")

_SCOPE_KEYWORDS = (
    ("color", ("color", "fill")),
    ("typography", ("text", "typography", "font", "letter", "line_height")),
    ("spacing", ("spacing", "gap", "padding", "margin")),
    ("sizing", ("size", "width", "height")),
    ("radius", ("radius", "corner")),
    ("shadow", ("shadow", "elevation")),
    ("blur", ("blur",)),
)

_NAME_KEYWORDS = (
    ("color", ("color", "bg", "background", "text", "border", "icon")),
    ("typography", ("font", "typography", "line-height", "letter-spacing")),
    ("spacing", ("space", "spacing", "padding", "gap", "margin")),
    ("sizing", ("size", "width", "height")),
    ("radius", ("radius", "corner", "rounded")),
    ("shadow", ("shadow", "elevation")),
    ("blur", ("blur",)),
)


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------


def _type_from_keywords(text: str, table) -> Optional[str]:
    lower = text.lower()
    for token_type, keywords in table:
        if any(keyword in lower for keyword in keywords):
            return token_type
    return None


def _type_from_value(value: str) -> Optional[str]:
    if _HEX_RE.match(value) or _FUNC_COLOR_RE.match(value):
        return "color"
    if _DIMENSION_RE.match(value):
        return "spacing"
    return None


def infer_token_type(name: str, value: str, scopes: Optional[Iterable[str]] = None) -> str:
    """Best-effort token type from scopes, then name, then value."""
    if scopes and not isinstance(scopes, str):
        scope_type = _type_from_keywords(" ".join(str(s) for s in scopes), _SCOPE_KEYWORDS)
        if scope_type:
            return scope_type
    return (
        _type_from_keywords(name, _NAME_KEYWORDS)
        or _type_from_value(value)
        or "unknown"
    )


# ---------------------------------------------------------------------------
# Value / name formatting
# ---------------------------------------------------------------------------


def clean_token_name(name: str) -> str:
    """Trim separators and collapse '/'/'.' runs to a single '/'."""
    cleaned = name.strip().strip("/.")
    return re.sub(r"[/.]+", "/", cleaned)


def format_token_value(value: Any) -> str:
    """Render a raw token value (color object, typography object, scalar)."""
    if value is None:
        return ""
    if isinstance(value, Mapping):
        if all(k in value for k in ("r", "g", "b")):
            return color_to_css(value) or ""
        if "fontFamily" in value:
            parts = []
            for key, prop in (
                ("fontFamily", "font-family"),
                ("fontSize", "font-size"),
                ("fontWeight", "font-weight"),
                ("lineHeight", "line-height"),
                ("letterSpacing", "letter-spacing"),
            ):
                if value.get(key):
                    parts.append(f"{prop}: {value[key]}")
            return "; ".join(parts)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_alias(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get("type") == "VARIABLE_ALIAS"


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def _parse_variables_export(data: Mapping[str, Any]) -> List[ProjectToken]:
    modes = data.get("modes")
    mode_names: Dict[str, str] = {}
    if isinstance(modes, Mapping):
        for mode_id, info in modes.items():
            if isinstance(info, Mapping) and info.get("name"):
                mode_names[str(mode_id)] = str(info["name"])
            else:
                mode_names[str(mode_id)] = str(mode_id)

    tokens: List[ProjectToken] = []
    for variable in data.get("variables") or []:
        if not isinstance(variable, Mapping) or not variable.get("name"):
            continue

        raw_values: Dict[str, Any] = {}
        resolved = variable.get("resolvedValuesByMode")
        if isinstance(resolved, Mapping):
            for mode_id, entry in resolved.items():
                if isinstance(entry, Mapping) and "resolvedValue" in entry:
                    raw_values[mode_names.get(str(mode_id), str(mode_id))] = entry["resolvedValue"]
        if not raw_values and isinstance(variable.get("valuesByMode"), Mapping):
            for mode_id, value in variable["valuesByMode"].items():
                if _is_alias(value):
                    continue
                raw_values[mode_names.get(str(mode_id), str(mode_id))] = value

        if not raw_values:
            logger.debug("Variable %r has no concrete value, skipped", variable.get("name"))
            continue

        value_by_mode = {mode: format_token_value(v) for mode, v in raw_values.items()}
        default_value = next(iter(value_by_mode.values()))
        name = clean_token_name(str(variable["name"]))
        tokens.append(ProjectToken(
            name=name,
            value=default_value,
            type=infer_token_type(name, default_value, variable.get("scopes")),
            value_by_mode=value_by_mode if len(value_by_mode) > 1 else None,
            modes=list(value_by_mode),
            description=variable.get("description") or None,
        ))
    return tokens


def _parse_flat(data: Mapping[str, Any]) -> List[ProjectToken]:
    tokens = []
    for key, value in data["tokens"].items():
        if value is None:
            continue
        text = format_token_value(value)
        name = clean_token_name(str(key))
        tokens.append(ProjectToken(name=name, value=text, type=infer_token_type(name, text)))
    return tokens


def _leaf(path: str, value: Any, description: Any = None) -> ProjectToken:
    name = clean_token_name(path or "token")
    text = format_token_value(value)
    return ProjectToken(
        name=name,
        value=text,
        type=infer_token_type(name, text),
        description=description if isinstance(description, str) and description else None,
    )


def _parse_nested(data: Any, path: str = "") -> List[ProjectToken]:
    if data is None:
        return []
    if isinstance(data, (str, int, float, bool)):
        return [_leaf(path, data)]
    if isinstance(data, Mapping):
        if "$value" in data:
            return [_leaf(path, data["$value"], data.get("$description"))]
        if "value" in data and not isinstance(data["value"], (Mapping, list)):
            return [_leaf(path, data["value"], data.get("description"))]
        tokens: List[ProjectToken] = []
        for key, value in data.items():
            # Skip metadata keys
            if str(key).startswith(("$", "_")):
                continue
            tokens.extend(_parse_nested(value, f"{path}/{key}" if path else str(key)))
        return tokens
    if isinstance(data, list):
        tokens = []
        for index, item in enumerate(data):
            tokens.extend(_parse_nested(item, f"{path}/{index}" if path else str(index)))
        return tokens
    return []


def parse_token_file(data: Any) -> List[ProjectToken]:
    """Parse an uploaded token file (already JSON-decoded), detecting its layout."""
    if isinstance(data, Mapping):
        if isinstance(data.get("variables"), list):
            logger.info("Parsing token file as design-tool variables export")
            return _parse_variables_export(data)
        flat = data.get("tokens")
        if isinstance(flat, Mapping) and flat:
            first = next(iter(flat.values()))
            if isinstance(first, (str, int, float)) and not isinstance(first, bool):
                logger.info("Parsing token file as flat tokens")
                return _parse_flat(data)
    logger.info("Parsing token file as nested JSON")
    return _parse_nested(data)
