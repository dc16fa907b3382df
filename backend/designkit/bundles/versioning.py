"""Bundle version policy.

    major  fixed by BUNDLE_MAJOR_VERSION (schema generation)
    minor  +1 when the token count grows past the previous bundle's count
           (optionally also when the rendered content changed), else carried
    patch  millisecond timestamp, for cache busting only

The returned version is always strictly greater than the previous one.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import NamedTuple, Optional

from ..settings import BUNDLE_MAJOR_VERSION
from .models import CompiledBundle

_VERSION_RE = re.compile(r"^\s*v?(\d+)\.(\d+)\.(\d+)\s*$")


class BundleVersion(NamedTuple):
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["BundleVersion"]:
        """Parse ``major.minor.patch``; None when absent or malformed."""
        if not isinstance(text, str):
            return None
        m = _VERSION_RE.match(text)
        if not m:
            return None
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def time_patch(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def next_version(
    previous: Optional[CompiledBundle],
    token_count: int,
    content_hash: str,
    now: datetime,
    bump_minor_on_change: bool = False,
    major: int = BUNDLE_MAJOR_VERSION,
) -> BundleVersion:
    """Decide the version of a new compilation of the same bundle key."""
    prev = BundleVersion.parse(previous.version) if previous is not None else None
    patch = time_patch(now)

    if prev is None:
        return BundleVersion(major, 0, patch)

    if major > prev.major:
        # New schema generation starts its minor line over
        return BundleVersion(major, 0, patch)

    minor = prev.minor
    if token_count > previous.token_count:
        minor += 1
    elif (
        bump_minor_on_change
        and previous.content_hash
        and content_hash != previous.content_hash
    ):
        minor += 1

    candidate = BundleVersion(prev.major, minor, patch)
    if candidate <= prev:
        # Clock went backwards or two runs in the same millisecond
        candidate = BundleVersion(prev.major, minor, prev.patch + 1)
    return candidate
