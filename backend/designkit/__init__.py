"""designkit — design-file to code-token toolkit.

Subpackages:
    figma    node property extraction and design-variable parsing
    tokens   token naming, matching and token-file parsing
    bundles  versioned style-sheet / JSON bundle compilation and publishing
"""

from .bundles import compile_component_bundle, compile_global_bundle
from .figma import extract_node_properties
from .tokens import match_references_to_tokens, match_variables_to_tokens, normalize_token_name

__all__ = [
    "compile_component_bundle",
    "compile_global_bundle",
    "extract_node_properties",
    "match_references_to_tokens",
    "match_variables_to_tokens",
    "normalize_token_name",
]
