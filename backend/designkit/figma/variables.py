"""Design-API variables payload -> DesignVariable list.

Expects the body of ``GET /v1/files/:key/variables/local``::

    {"meta": {"variables": {id: {...}}, "variableCollections": {id: {...}}}}

Mode ids are resolved to mode names through the owning collection so that
``values_by_mode`` is keyed the same way project tokens are.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import DesignVariable
from .paint import as_number, color_to_css, format_number

logger = logging.getLogger(__name__)

_RESOLVED_TYPES = {
    "COLOR": "color",
    "FLOAT": "float",
    "STRING": "string",
    "BOOLEAN": "boolean",
}

# Alias chains deeper than this are treated as unresolvable
_MAX_ALIAS_DEPTH = 8


def _is_alias(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get("type") == "VARIABLE_ALIAS"


def _mode_names(collections: Mapping[str, Any]) -> Dict[str, str]:
    """modeId -> mode name across every collection."""
    names: Dict[str, str] = {}
    for collection in collections.values():
        if not isinstance(collection, Mapping):
            continue
        for mode in collection.get("modes") or []:
            if isinstance(mode, Mapping) and mode.get("modeId"):
                names[str(mode["modeId"])] = str(mode.get("name") or mode["modeId"])
    return names


def _resolve_alias(
    value: Any,
    mode_id: str,
    raw_variables: Mapping[str, Any],
    depth: int = 0,
) -> Any:
    """Follow VARIABLE_ALIAS references to a concrete value (or None)."""
    if not _is_alias(value):
        return value
    if depth >= _MAX_ALIAS_DEPTH:
        logger.debug("Alias chain too deep at %r", value.get("id"))
        return None

    target_id = value.get("id")
    target = raw_variables.get(target_id) if isinstance(target_id, str) else None
    if not isinstance(target, Mapping):
        return None
    values = target.get("valuesByMode")
    if not isinstance(values, Mapping) or not values:
        return None
    # Same mode when the target lives in the same collection, else its first mode
    next_value = values.get(mode_id, next(iter(values.values())))
    return _resolve_alias(next_value, mode_id, raw_variables, depth + 1)


def parse_variables_response(response: Mapping[str, Any]) -> List[DesignVariable]:
    """Convert a local-variables API response into DesignVariables.

    Aliases are resolved through the payload; values that stay unresolved
    are dropped from ``values_by_mode``. Entries without a name are skipped.
    """
    meta = response.get("meta") if isinstance(response, Mapping) else None
    if not isinstance(meta, Mapping):
        return []
    raw_variables = meta.get("variables")
    if not isinstance(raw_variables, Mapping):
        return []
    collections = meta.get("variableCollections")
    mode_names = _mode_names(collections if isinstance(collections, Mapping) else {})

    variables: List[DesignVariable] = []
    for var_id, data in raw_variables.items():
        if not isinstance(data, Mapping) or not data.get("name"):
            continue

        values: Dict[str, Any] = {}
        values_by_mode = data.get("valuesByMode")
        if isinstance(values_by_mode, Mapping):
            for mode_id, raw_value in values_by_mode.items():
                resolved = _resolve_alias(raw_value, mode_id, raw_variables)
                if resolved is None:
                    continue
                values[mode_names.get(str(mode_id), str(mode_id))] = resolved

        variables.append(DesignVariable(
            id=str(data.get("id") or var_id),
            name=str(data["name"]),
            resolved_type=_RESOLVED_TYPES.get(str(data.get("resolvedType")), "string"),
            values_by_mode=values,
        ))

    logger.debug("Parsed %d design variables", len(variables))
    return variables


def format_variable_value(value: Any, resolved_type: str = "string") -> Optional[str]:
    """Render a raw variable value as a style string (None if unrenderable)."""
    if value is None or _is_alias(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if resolved_type == "color" or isinstance(value, Mapping):
        return color_to_css(value)
    if isinstance(value, (int, float)):
        return format_number(as_number(value))
    return str(value)


def variable_default_value(variable: DesignVariable) -> Optional[str]:
    """Formatted value of the variable's first mode."""
    for value in variable.values_by_mode.values():
        return format_variable_value(value, variable.resolved_type)
    return None
