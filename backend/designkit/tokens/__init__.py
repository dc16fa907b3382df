"""Project tokens: models, name canonicalization, matching and file parsing."""

from .matching import (
    extract_token_refs,
    match_references_to_tokens,
    match_variables_to_tokens,
)
from .models import MatchedToken, ProjectToken, TokenMatch
from .naming import css_var, normalize_token_name
from .parser import parse_token_file

__all__ = [
    "MatchedToken",
    "ProjectToken",
    "TokenMatch",
    "css_var",
    "extract_token_refs",
    "match_references_to_tokens",
    "match_variables_to_tokens",
    "normalize_token_name",
    "parse_token_file",
]
