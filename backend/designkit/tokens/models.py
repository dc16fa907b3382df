"""Pydantic models for project tokens and match results."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

TokenType = Literal[
    "color", "typography", "spacing", "sizing", "radius", "shadow", "blur", "unknown",
]

# Fixed category order used wherever tokens are grouped by type
TOKEN_TYPE_ORDER: Tuple[str, ...] = (
    "color", "typography", "spacing", "sizing", "radius", "shadow", "blur", "unknown",
)


class ProjectToken(BaseModel):
    """A project's canonical design token.

    ``value`` is the default (base) value. ``value_by_mode`` holds per-mode
    overrides; a token without it applies its base value in every mode.
    """
    name: str
    value: str
    type: TokenType = "unknown"
    value_by_mode: Optional[Dict[str, str]] = None
    modes: Optional[List[str]] = None
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> str:
        """Unrecognised token types degrade to 'unknown' instead of failing."""
        if isinstance(v, str) and v.lower() in TOKEN_TYPE_ORDER:
            return v.lower()
        return "unknown"

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        return v if isinstance(v, str) else str(v)

    @field_validator("value_by_mode", mode="before")
    @classmethod
    def stringify_mode_values(cls, v: Any) -> Optional[Dict[str, str]]:
        if not isinstance(v, dict):
            return None
        return {str(mode): str(value) for mode, value in v.items() if value is not None}

    @property
    def has_mode_overrides(self) -> bool:
        return bool(self.value_by_mode)

    def declared_modes(self) -> List[str]:
        """Modes this token knows about, in declaration order."""
        seen: List[str] = []
        for mode in (self.modes or []) + list((self.value_by_mode or {}).keys()):
            if mode not in seen:
                seen.append(mode)
        return seen

    def value_for_mode(self, mode: str) -> Optional[str]:
        """Value to render in ``mode``; None if the token overrides other modes only."""
        if not self.has_mode_overrides:
            return self.value
        return self.value_by_mode.get(mode)


class MatchedToken(BaseModel):
    """The project token side of a match, with its style-variable reference."""
    name: str
    value: str
    type: TokenType
    css_var: str


class TokenMatch(BaseModel):
    """One design variable paired with at most one project token."""
    variable_id: str
    variable_name: str
    matched_token: Optional[MatchedToken] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    strategy: Optional[str] = None

    @property
    def css_var(self) -> Optional[str]:
        return self.matched_token.css_var if self.matched_token else None

    @property
    def is_exact(self) -> bool:
        return self.confidence == 1.0


class ReferenceMatch(BaseModel):
    """A source-code reference resolved to a project token."""
    ref: str
    token: MatchedToken
    confidence: float = Field(ge=0.0, le=1.0)
    strategy: str


class ReferenceMatchResult(BaseModel):
    """Reverse-mode output: matched references and the ones with no token."""
    matched: List[ReferenceMatch] = Field(default_factory=list)
    unmatched: List[str] = Field(default_factory=list)
