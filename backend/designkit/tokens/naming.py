"""Token name canonicalization.

    "Color/Primary/500"  -> "color-primary-500"
    "spacing.large"      -> "spacing-large"
    "Color Primary 500"  -> "color-primary-500"

The mapping is a projection: normalizing a normalized name returns it
unchanged, and no input raises.
"""

from __future__ import annotations

import re
from typing import List

_SEPARATOR_RE = re.compile(r"[/.]")
_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-+")


def normalize_token_name(name: str) -> str:
    """Canonicalize a token name into a lowercase hyphenated identifier."""
    if not isinstance(name, str):
        name = "" if name is None else str(name)
    result = name.lower()
    result = _SEPARATOR_RE.sub("-", result)
    result = _WHITESPACE_RE.sub("-", result)
    result = _DISALLOWED_RE.sub("", result)
    result = _HYPHEN_RUN_RE.sub("-", result)
    return result.strip("-")


def name_segments(normalized: str) -> List[str]:
    """Hyphen-separated segments of a normalized name ([] for "")."""
    return [segment for segment in normalized.split("-") if segment]


def css_custom_property(name: str) -> str:
    """``--<normalized-name>``"""
    return f"--{normalize_token_name(name)}"


def css_var(name: str) -> str:
    """``var(--<normalized-name>)``"""
    return f"var({css_custom_property(name)})"
