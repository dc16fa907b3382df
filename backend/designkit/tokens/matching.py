"""Design variable / source reference -> project token matching.

Matching is an ordered list of pure scoring strategies over normalized
names. For one (variable, token) pair the strategies run in order and the
first positive score stands unless a later strategy scores strictly higher;
an exact match (1.0) ends evaluation. Across tokens the highest score wins,
ties going to the earlier token.

    exact            normalized names equal                  -> 1.0
    containment      one name is a substring of the other,
                     sharing at least one whole segment      -> len(short) / len(long)
    segment_overlap  shared hyphen segments                  -> |shared| / max(|segments|)

Only an exact match scores 1.0; callers that need strict identity filter
on ``confidence == 1.0``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..figma.models import DesignVariable
from ..settings import MATCH_REVERSE_MIN_CONFIDENCE
from .models import (
    MatchedToken,
    ProjectToken,
    ReferenceMatch,
    ReferenceMatchResult,
    TokenMatch,
)
from .naming import css_var, name_segments, normalize_token_name

logger = logging.getLogger(__name__)

Strategy = Callable[[str, str], float]

# Non-exact strategies never reach 1.0 (e.g. "primary-color" vs "color-primary")
_NON_EXACT_CEILING = 0.99

# Matches var(--name) as well as bare --name declarations
_REFERENCE_RE = re.compile(r"--([a-z0-9-]+)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Strategies (pure, over already-normalized names)
# ---------------------------------------------------------------------------


def exact_score(a: str, b: str) -> float:
    return 1.0 if a and a == b else 0.0


def containment_score(a: str, b: str) -> float:
    if not a or not b or a == b:
        return 0.0
    if not set(name_segments(a)) & set(name_segments(b)):
        return 0.0
    if a in b or b in a:
        score = min(len(a), len(b)) / max(len(a), len(b))
        return min(score, _NON_EXACT_CEILING)
    return 0.0


def segment_overlap_score(a: str, b: str) -> float:
    segments_a = name_segments(a)
    segments_b = name_segments(b)
    if not segments_a or not segments_b or a == b:
        return 0.0
    shared = set(segments_a) & set(segments_b)
    if not shared:
        return 0.0
    score = len(shared) / max(len(segments_a), len(segments_b))
    return min(score, _NON_EXACT_CEILING)


MATCH_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("exact", exact_score),
    ("containment", containment_score),
    ("segment_overlap", segment_overlap_score),
)


def score_names(
    a: str,
    b: str,
    strategies: Sequence[Tuple[str, Strategy]] = MATCH_STRATEGIES,
) -> Tuple[float, Optional[str]]:
    """Score two normalized names; returns (confidence, winning strategy)."""
    best_score, best_strategy = 0.0, None
    for name, strategy in strategies:
        score = strategy(a, b)
        if score > best_score:
            best_score, best_strategy = score, name
        if best_score >= 1.0:
            break
    return best_score, best_strategy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce(items: Iterable[Any], model: type) -> List[Any]:
    return [item if isinstance(item, model) else model.model_validate(item) for item in items]


def _to_matched(token: ProjectToken) -> MatchedToken:
    return MatchedToken(
        name=token.name,
        value=token.value,
        type=token.type,
        css_var=css_var(token.name),
    )


def _best_token(
    normalized: str,
    normalized_tokens: Sequence[str],
    strategies: Sequence[Tuple[str, Strategy]],
) -> Tuple[Optional[int], float, Optional[str]]:
    """Index, confidence and strategy of the best-scoring token."""
    best_index: Optional[int] = None
    best_score, best_strategy = 0.0, None
    for index, token_name in enumerate(normalized_tokens):
        score, strategy = score_names(normalized, token_name, strategies)
        if score > best_score:
            best_index, best_score, best_strategy = index, score, strategy
            if score >= 1.0:
                break
    return best_index, best_score, best_strategy


# ---------------------------------------------------------------------------
# Forward mode: design variables -> tokens
# ---------------------------------------------------------------------------


def match_variables_to_tokens(
    variables: Sequence[DesignVariable],
    tokens: Sequence[ProjectToken],
    strategies: Sequence[Tuple[str, Strategy]] = MATCH_STRATEGIES,
) -> List[TokenMatch]:
    """Match each design variable to its best project token.

    Returns one TokenMatch per variable, in input order. A variable with no
    qualifying token gets ``matched_token=None`` and ``confidence=0``.
    """
    variables = _coerce(variables, DesignVariable)
    tokens = _coerce(tokens, ProjectToken)
    normalized_tokens = [normalize_token_name(t.name) for t in tokens]

    matches: List[TokenMatch] = []
    for variable in variables:
        index, score, strategy = _best_token(
            normalize_token_name(variable.name), normalized_tokens, strategies
        )
        if index is None:
            matches.append(TokenMatch(variable_id=variable.id, variable_name=variable.name))
            continue
        matches.append(TokenMatch(
            variable_id=variable.id,
            variable_name=variable.name,
            matched_token=_to_matched(tokens[index]),
            confidence=score,
            strategy=strategy,
        ))

    exact = sum(1 for m in matches if m.is_exact)
    matched = sum(1 for m in matches if m.matched_token is not None)
    logger.info(
        "Matched %d/%d design variables to %d tokens (%d exact)",
        matched, len(matches), len(tokens), exact,
    )
    return matches


# ---------------------------------------------------------------------------
# Reverse mode: source references -> tokens
# ---------------------------------------------------------------------------


def extract_token_refs(source_text: str) -> List[str]:
    """Pull custom-property references out of generated source.

    Finds ``var(--name)`` and bare ``--name`` occurrences; returns
    normalized names, de-duplicated in first-seen order.
    """
    if not isinstance(source_text, str):
        return []
    refs: List[str] = []
    seen = set()
    for match in _REFERENCE_RE.finditer(source_text):
        ref = normalize_token_name(match.group(1))
        if ref and ref not in seen:
            seen.add(ref)
            refs.append(ref)
    return refs


def match_references_to_tokens(
    refs: Iterable[str],
    tokens: Sequence[ProjectToken],
    min_confidence: Optional[float] = None,
    strategies: Sequence[Tuple[str, Strategy]] = MATCH_STRATEGIES,
) -> ReferenceMatchResult:
    """Resolve free-text references against project tokens.

    A reference matches when its best score is positive and at least
    ``min_confidence`` (default: MATCH_REVERSE_MIN_CONFIDENCE). Everything
    else is reported in ``unmatched``, never raised.
    """
    if min_confidence is None:
        min_confidence = MATCH_REVERSE_MIN_CONFIDENCE
    tokens = _coerce(tokens, ProjectToken)
    normalized_tokens = [normalize_token_name(t.name) for t in tokens]

    result = ReferenceMatchResult()
    seen = set()
    for ref in refs:
        normalized = normalize_token_name(ref)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)

        index, score, strategy = _best_token(normalized, normalized_tokens, strategies)
        if index is None or score < min_confidence:
            result.unmatched.append(normalized)
            continue
        result.matched.append(ReferenceMatch(
            ref=normalized,
            token=_to_matched(tokens[index]),
            confidence=score,
            strategy=strategy,
        ))

    if result.unmatched:
        logger.info("Unmatched token references: %s", ", ".join(result.unmatched))
    return result
