"""Runtime settings — tunable parameters for matching and bundle compilation.

All values read from environment variables with defaults matching the
behaviour callers rely on. Import from here instead of hardcoding.

Per-call overrides go through bundles.models.BundleOptions, whose defaults
are taken from this module.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


def _bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes", "on")


# =====================================================================
# Bundle Compiler
# =====================================================================

# Schema generation of the bundle layout. Minor/patch are derived per run.
BUNDLE_MAJOR_VERSION = _int("BUNDLE_MAJOR_VERSION", 1)

# Emit a trailing :root block holding every token's base value when the
# token set has more than one mode (for consumers that ignore modes)
BUNDLE_EMIT_DEFAULT_BLOCK = _bool("BUNDLE_EMIT_DEFAULT_BLOCK", True)

# Selector for mode-scoped blocks; {mode} is replaced by the mode name
BUNDLE_MODE_SELECTOR = _str("BUNDLE_MODE_SELECTOR", ':root[data-theme="{mode}"]')

# Bump minor when the rendered content changes even if the token count
# did not grow. Off = only count growth bumps minor.
BUNDLE_BUMP_MINOR_ON_CHANGE = _bool("BUNDLE_BUMP_MINOR_ON_CHANGE", False)

# First comment line of every generated style sheet
BUNDLE_HEADER = _str("BUNDLE_HEADER", "Design Token Bundle")


# =====================================================================
# Token Matching
# =====================================================================

# Minimum confidence for a source reference to count as matched
# (0.0 = any positive score is a match)
MATCH_REVERSE_MIN_CONFIDENCE = _float("MATCH_REVERSE_MIN_CONFIDENCE", 0.0)


# =====================================================================
# Bundle Sinks (storage adapters)
# =====================================================================

# Root directory for FileSystemBundleSink
BUNDLE_OUTPUT_DIR = _str("BUNDLE_OUTPUT_DIR", "bundles")

# Object-store base URL and bearer token for HttpBundleSink
BUNDLE_STORAGE_URL = _str("BUNDLE_STORAGE_URL", "")
BUNDLE_STORAGE_TOKEN = _str("BUNDLE_STORAGE_TOKEN", "")

BUNDLE_HTTP_TIMEOUT = _float("BUNDLE_HTTP_TIMEOUT", 30.0)
