"""Bundle publishing — compile against the current bundle, then store.

The service never looks up tokens itself: callers hand it a TokenSet they
have already authorised for the project, and a sink scoped however they
like. It reads the previous bundle for the key from the sink so version
numbers keep increasing across processes.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from ..logging_config import get_bundle_logger
from .compiler import compile_component_bundle, compile_global_bundle
from .errors import NoTokensError
from .models import BundleKey, BundleLocation, BundleOptions, CompiledBundle, TokenSet
from .sinks import BundleSink


class PublishResult(BaseModel):
    bundle: CompiledBundle
    location: BundleLocation
    unmatched_refs: List[str] = Field(default_factory=list)


class BundleService:
    """Compiles token sets and hands the results to a sink.

    Args:
        sink: Storage adapter for current bundles.
        options: Compiler options applied to every publish.
        logger: Defaults to the ``publish`` logger from logging_config.
    """

    def __init__(
        self,
        sink: BundleSink,
        options: Optional[BundleOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.sink = sink
        self.options = options or BundleOptions()
        self.logger = logger or get_bundle_logger()

    def publish_global(self, token_set: TokenSet) -> PublishResult:
        """Compile and store the project's global bundle.

        Raises:
            NoTokensError: the token set is empty.
            BundleSinkError: the sink failed to read or write.
        """
        key = BundleKey(project_id=token_set.project_id, type="global")
        previous = self.sink.current(key)
        try:
            bundle = compile_global_bundle(token_set.tokens, previous, self.options)
        except NoTokensError:
            self.logger.warning(f"[{token_set.project_id}] global bundle skipped: no active tokens")
            raise NoTokensError(token_set.project_id) from None

        location = self.sink.publish(key, bundle)
        self.logger.info(
            f"[{token_set.project_id}] published global bundle v{bundle.version} "
            f"({bundle.token_count} tokens"
            f"{', was v' + previous.version if previous else ''}) -> {location.json_url}"
        )
        return PublishResult(bundle=bundle, location=location)

    def publish_component(
        self,
        token_set: TokenSet,
        component_id: str,
        source_text: Union[str, Iterable[str]],
    ) -> PublishResult:
        """Compile and store one component's token bundle.

        Unmatched references come back on the result; they are logged but
        never fail the publish.
        """
        key = BundleKey(
            project_id=token_set.project_id, type="component", component_id=component_id,
        )
        previous = self.sink.current(key)
        if not isinstance(source_text, str):
            source_text = list(source_text)
        result = compile_component_bundle(
            source_text,
            token_set.tokens,
            previous,
            self.options,
            component_id=component_id,
        )

        location = self.sink.publish(key, result.bundle)
        if result.unmatched_refs:
            self.logger.warning(
                f"[{token_set.project_id}] component {component_id}: "
                f"{len(result.unmatched_refs)} unmatched refs: {', '.join(result.unmatched_refs)}"
            )
        self.logger.info(
            f"[{token_set.project_id}] published component bundle {component_id} "
            f"v{result.bundle.version} ({result.bundle.token_count} tokens) -> {location.json_url}"
        )
        return PublishResult(
            bundle=result.bundle,
            location=location,
            unmatched_refs=result.unmatched_refs,
        )
