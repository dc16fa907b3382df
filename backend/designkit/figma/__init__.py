"""Design-API input handling.

- models: DesignNode / DesignVariable pydantic models
- paint: paint, gradient, effect and blend-mode -> CSS conversion
- properties: single-node property bag extraction
- variables: local-variables payload -> DesignVariable list
"""

from .models import DesignNode, DesignVariable
from .properties import extract_node_properties
from .variables import parse_variables_response

__all__ = [
    "DesignNode",
    "DesignVariable",
    "extract_node_properties",
    "parse_variables_response",
]
