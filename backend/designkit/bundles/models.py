"""Pydantic models for compiled bundles and compiler options."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..settings import (
    BUNDLE_BUMP_MINOR_ON_CHANGE,
    BUNDLE_EMIT_DEFAULT_BLOCK,
    BUNDLE_MODE_SELECTOR,
    MATCH_REVERSE_MIN_CONFIDENCE,
)
from ..tokens.models import ProjectToken, ReferenceMatch

BundleType = Literal["global", "component"]


class BundleOptions(BaseModel):
    """Per-call compiler options (defaults come from designkit.settings)."""
    emit_default_block: bool = BUNDLE_EMIT_DEFAULT_BLOCK
    mode_selector: str = BUNDLE_MODE_SELECTOR
    bump_minor_on_change: bool = BUNDLE_BUMP_MINOR_ON_CHANGE
    reverse_min_confidence: float = Field(default=MATCH_REVERSE_MIN_CONFIDENCE, ge=0.0, le=1.0)


class CompiledBundle(BaseModel):
    """A versioned style-sheet + JSON alias-map artifact."""
    type: BundleType
    version: str
    css_content: Optional[str] = None
    json_content: str
    token_count: int = Field(ge=0)
    modes: List[str] = Field(default_factory=list)
    created_at: datetime
    # sha256 of css + json; lets the next run detect value-only changes
    content_hash: str = ""
    component_id: Optional[str] = None


class ComponentBundleResult(BaseModel):
    """Component compilation output: bundle plus reference diagnostics."""
    bundle: CompiledBundle
    matched: List[ReferenceMatch] = Field(default_factory=list)
    unmatched_refs: List[str] = Field(default_factory=list)


class BundleKey(BaseModel):
    """Identity of the single current bundle: (project, type[, component])."""
    model_config = ConfigDict(frozen=True)

    project_id: str
    type: BundleType = "global"
    component_id: Optional[str] = None

    @property
    def path(self) -> str:
        """Storage-relative path segment for this key."""
        if self.type == "component":
            return f"{self.project_id}/component/{self.component_id or '_'}"
        return f"{self.project_id}/global"


class BundleLocation(BaseModel):
    """Where a sink stored the artifacts."""
    css_url: Optional[str] = None
    json_url: str


class TokenSet(BaseModel):
    """A caller-verified token set for one project (the compile capability)."""
    project_id: str
    tokens: List[ProjectToken] = Field(default_factory=list)
