"""Token bundle compiler: style sheet and JSON alias map generation.

Global bundle: every active token of a project, grouped by type, rendered
as CSS custom properties. With more than one mode in the token set each
mode gets its own block (tokens overriding that mode, plus tokens with no
per-mode override), followed by an optional ``:root`` block holding every
base value for mode-unaware consumers.

Component bundle: the tokens one component's generated source actually
references, as a JSON map only.

Compilation is pure: given the same tokens and options the style sheet and
JSON text are byte-identical; only the version patch and timestamp vary.
"""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..settings import BUNDLE_HEADER
from ..tokens.matching import extract_token_refs, match_references_to_tokens
from ..tokens.models import TOKEN_TYPE_ORDER, ProjectToken
from ..tokens.naming import css_var, normalize_token_name
from .errors import NoTokensError
from .models import BundleOptions, CompiledBundle, ComponentBundleResult
from .versioning import next_version

logger = logging.getLogger(__name__)

_DEFAULT_SELECTOR = ":root"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_tokens(tokens: Sequence[Any]) -> List[ProjectToken]:
    return [
        t if isinstance(t, ProjectToken) else ProjectToken.model_validate(t)
        for t in tokens or []
    ]


def _renderable(tokens: List[ProjectToken]) -> List[ProjectToken]:
    """Drop tokens whose name normalizes to nothing (no valid variable name)."""
    kept = []
    for token in tokens:
        if normalize_token_name(token.name):
            kept.append(token)
        else:
            logger.warning("Token %r has no usable variable name, skipped", token.name)
    return kept


def collect_modes(tokens: Sequence[ProjectToken]) -> List[str]:
    """Distinct modes across the token set, in first-seen order."""
    modes: List[str] = []
    for token in tokens:
        for mode in token.declared_modes():
            if mode not in modes:
                modes.append(mode)
    return modes


def group_by_type(
    entries: Sequence[Tuple[ProjectToken, str]],
) -> List[Tuple[str, List[Tuple[ProjectToken, str]]]]:
    """Group (token, value) pairs into the fixed category order, non-empty only."""
    groups: Dict[str, List[Tuple[ProjectToken, str]]] = {t: [] for t in TOKEN_TYPE_ORDER}
    for token, value in entries:
        groups.get(token.type, groups["unknown"]).append((token, value))
    return [(category, groups[category]) for category in TOKEN_TYPE_ORDER if groups[category]]


def mode_selector(template: str, mode: str) -> str:
    return template.replace("{mode}", mode.replace('"', '\\"'))


def _content_hash(*parts: Optional[str]) -> str:
    digest = hashlib.sha256()
    for part in parts:
        digest.update((part or "").encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_block(selector: str, entries: Sequence[Tuple[ProjectToken, str]]) -> List[str]:
    """One ``selector { ... }`` block with a comment heading per category."""
    lines = [f"{selector} {{"]
    for category, items in group_by_type(entries):
        lines.append(f"  /* {category.capitalize()} Tokens */")
        for token, value in items:
            lines.append(f"  --{normalize_token_name(token.name)}: {value};")
        lines.append("")
    if lines[-1] == "":
        lines.pop()
    lines.append("}")
    return lines


def render_stylesheet(
    tokens: Sequence[ProjectToken],
    options: BundleOptions,
) -> Tuple[str, int, List[str]]:
    """Render the global style sheet.

    Returns (css text, number of distinct tokens rendered, modes present).
    """
    modes = collect_modes(tokens)
    blocks: List[List[str]] = []
    rendered = set()

    if len(modes) > 1:
        for mode in modes:
            entries = []
            for index, token in enumerate(tokens):
                value = token.value_for_mode(mode)
                if value is None:
                    continue
                entries.append((token, value))
                rendered.add(index)
            if entries:
                blocks.append(render_block(mode_selector(options.mode_selector, mode), entries))
        if options.emit_default_block:
            blocks.append(render_block(_DEFAULT_SELECTOR, [(t, t.value) for t in tokens]))
            rendered.update(range(len(tokens)))
    else:
        blocks.append(render_block(_DEFAULT_SELECTOR, [(t, t.value) for t in tokens]))
        rendered.update(range(len(tokens)))

    lines = [
        f"/* {BUNDLE_HEADER} */",
        f"/* Token Count: {len(rendered)} */",
    ]
    if len(modes) > 1:
        lines.append(f"/* Modes: {', '.join(modes)} */")
    for block in blocks:
        lines.append("")
        lines.extend(block)
    return "\n".join(lines) + "\n", len(rendered), modes


def render_alias_map(tokens: Sequence[ProjectToken]) -> str:
    """JSON object: original token name -> ``var(--<normalized-name>)``."""
    alias_map = {token.name: css_var(token.name) for token in tokens}
    return json.dumps(alias_map, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def compile_global_bundle(
    tokens: Sequence[ProjectToken],
    previous_bundle: Optional[CompiledBundle] = None,
    options: Optional[BundleOptions] = None,
    now: Optional[datetime] = None,
) -> CompiledBundle:
    """Compile a project's active tokens into the global bundle.

    Raises:
        NoTokensError: when there is nothing to compile. An empty global
            bundle would look like a successful zero-token compile.
    """
    options = options or BundleOptions()
    tokens = _renderable(_coerce_tokens(tokens))
    if not tokens:
        raise NoTokensError()

    css_content, token_count, modes = render_stylesheet(tokens, options)
    json_content = render_alias_map(tokens)
    content_hash = _content_hash(css_content, json_content)
    created_at = _now(now)
    version = next_version(
        previous_bundle,
        token_count,
        content_hash,
        created_at,
        bump_minor_on_change=options.bump_minor_on_change,
    )

    logger.info(
        "Compiled global bundle %s: %d tokens, %d modes, css=%d bytes, json=%d bytes",
        version, token_count, len(modes), len(css_content), len(json_content),
    )
    return CompiledBundle(
        type="global",
        version=str(version),
        css_content=css_content,
        json_content=json_content,
        token_count=token_count,
        modes=modes,
        created_at=created_at,
        content_hash=content_hash,
    )


def compile_component_bundle(
    source_text: Union[str, Sequence[str]],
    tokens: Sequence[ProjectToken],
    previous_bundle: Optional[CompiledBundle] = None,
    options: Optional[BundleOptions] = None,
    component_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ComponentBundleResult:
    """Compile the tokens referenced by one component's generated source.

    ``source_text`` may be a single string or several (e.g. code and its
    stylesheet). Unmatched references are returned as diagnostics and
    never abort compilation.
    """
    options = options or BundleOptions()
    if source_text is None:
        source_text = ""
    elif not isinstance(source_text, str):
        source_text = "\n".join(s for s in source_text if isinstance(s, str))
    tokens = _coerce_tokens(tokens)

    refs = extract_token_refs(source_text)
    result = match_references_to_tokens(refs, tokens, options.reverse_min_confidence)

    alias_map: Dict[str, Dict[str, str]] = {}
    for match in result.matched:
        alias_map.setdefault(match.token.name, {
            "value": match.token.value,
            "css_var": match.token.css_var,
            "type": match.token.type,
        })
    json_content = json.dumps(alias_map, indent=2, ensure_ascii=False)

    by_name = {t.name: t for t in tokens}
    modes = collect_modes([by_name[name] for name in alias_map if name in by_name])

    content_hash = _content_hash(json_content)
    created_at = _now(now)
    version = next_version(
        previous_bundle,
        len(alias_map),
        content_hash,
        created_at,
        bump_minor_on_change=options.bump_minor_on_change,
    )

    logger.info(
        "Compiled component bundle %s for %s: %d refs, %d tokens, %d unmatched",
        version, component_id or "<component>", len(refs), len(alias_map),
        len(result.unmatched),
    )
    bundle = CompiledBundle(
        type="component",
        version=str(version),
        css_content=None,
        json_content=json_content,
        token_count=len(alias_map),
        modes=modes,
        created_at=created_at,
        content_hash=content_hash,
        component_id=component_id,
    )
    return ComponentBundleResult(
        bundle=bundle,
        matched=result.matched,
        unmatched_refs=result.unmatched,
    )
