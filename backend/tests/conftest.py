"""Shared fixtures for designkit tests.

LOG_DIR is pointed at a throwaway directory before designkit is imported so
the publish logger never writes into the source tree.
"""

from __future__ import annotations

import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="designkit-logs-"))

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from designkit.tokens.models import ProjectToken  # noqa: E402

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _make_token(name, value, token_type="unknown", **kwargs):
    """Build a ProjectToken with only the fields a test cares about."""
    return ProjectToken(name=name, value=value, type=token_type, **kwargs)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def basic_tokens():
    return [
        _make_token("Color/Primary/500", "#3366ff", "color"),
        _make_token("spacing.lg", "1.5rem", "spacing"),
    ]


@pytest.fixture
def themed_tokens():
    return [
        _make_token(
            "color/bg", "#ffffff", "color",
            value_by_mode={"light": "#ffffff", "dark": "#111111"},
        ),
        _make_token(
            "color/text", "#111111", "color",
            value_by_mode={"light": "#111111", "dark": "#eeeeee"},
        ),
        _make_token("radius/md", "8px", "radius"),
    ]
