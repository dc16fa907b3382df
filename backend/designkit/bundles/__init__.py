"""Bundle compilation, versioning and publishing.

- compiler: token set -> style sheet + JSON alias map (global / component)
- versioning: major.minor.patch policy against the previous bundle
- sinks: storage adapters (memory, filesystem, HTTP object store)
- service: compile-against-current-then-publish orchestration
"""

from .compiler import compile_component_bundle, compile_global_bundle
from .errors import BundleError, BundleSinkError, NoTokensError
from .models import (
    BundleKey,
    BundleLocation,
    BundleOptions,
    CompiledBundle,
    ComponentBundleResult,
    TokenSet,
)
from .service import BundleService, PublishResult
from .sinks import BundleSink, FileSystemBundleSink, HttpBundleSink, InMemoryBundleSink

__all__ = [
    "BundleError",
    "BundleKey",
    "BundleLocation",
    "BundleOptions",
    "BundleService",
    "BundleSink",
    "BundleSinkError",
    "CompiledBundle",
    "ComponentBundleResult",
    "FileSystemBundleSink",
    "HttpBundleSink",
    "InMemoryBundleSink",
    "NoTokensError",
    "PublishResult",
    "TokenSet",
    "compile_component_bundle",
    "compile_global_bundle",
]
