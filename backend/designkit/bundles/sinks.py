"""Bundle sinks — where compiled bundles are stored and read back.

A sink holds exactly one current bundle per BundleKey. ``current`` returns
it (or None) so the next compilation can version against it; ``publish``
replaces it and reports where the artifacts live.

Each key stores three artifacts:
    tokens.css   style sheet (global bundles only)
    tokens.json  JSON alias map / component token map
    bundle.json  bundle metadata (version, token count, hash, ...)

Usage:
    sink = FileSystemBundleSink("bundles")
    location = sink.publish(BundleKey(project_id="p1"), bundle)
    previous = sink.current(BundleKey(project_id="p1"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

import httpx
from pydantic import ValidationError

from ..settings import (
    BUNDLE_HTTP_TIMEOUT,
    BUNDLE_OUTPUT_DIR,
    BUNDLE_STORAGE_TOKEN,
    BUNDLE_STORAGE_URL,
)
from .errors import BundleSinkError
from .models import BundleKey, BundleLocation, CompiledBundle

logger = logging.getLogger(__name__)

CSS_FILENAME = "tokens.css"
JSON_FILENAME = "tokens.json"
META_FILENAME = "bundle.json"


class BundleSink(Protocol):
    """Storage adapter for compiled bundles."""

    def current(self, key: BundleKey) -> Optional[CompiledBundle]:
        ...

    def publish(self, key: BundleKey, bundle: CompiledBundle) -> BundleLocation:
        ...


def _metadata(bundle: CompiledBundle) -> str:
    """bundle.json body: the full bundle minus the artifact texts."""
    return bundle.model_dump_json(exclude={"css_content", "json_content"}, indent=2)


def _load_bundle(meta_text: str, json_text: str, css_text: Optional[str]) -> CompiledBundle:
    try:
        data = json.loads(meta_text)
    except json.JSONDecodeError as e:
        raise BundleSinkError(f"Corrupt bundle metadata: {e}") from e
    if not isinstance(data, dict):
        raise BundleSinkError("Corrupt bundle metadata: expected a JSON object")
    data["json_content"] = json_text
    data["css_content"] = css_text
    try:
        return CompiledBundle.model_validate(data)
    except ValidationError as e:
        raise BundleSinkError(f"Corrupt bundle metadata: {e}") from e


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class InMemoryBundleSink:
    """Keeps bundles in a dict. Used by tests and single-process callers."""

    def __init__(self) -> None:
        self.bundles: Dict[BundleKey, CompiledBundle] = {}

    def current(self, key: BundleKey) -> Optional[CompiledBundle]:
        return self.bundles.get(key)

    def publish(self, key: BundleKey, bundle: CompiledBundle) -> BundleLocation:
        self.bundles[key] = bundle
        base = f"memory://{key.path}"
        return BundleLocation(
            css_url=f"{base}/{CSS_FILENAME}" if bundle.css_content is not None else None,
            json_url=f"{base}/{JSON_FILENAME}",
        )


# ---------------------------------------------------------------------------
# Local filesystem
# ---------------------------------------------------------------------------


class FileSystemBundleSink:
    """Writes bundles under ``root/<project>/<type>[/<component>]/``.

    Args:
        root: Output directory. Falls back to BUNDLE_OUTPUT_DIR.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root or BUNDLE_OUTPUT_DIR)

    def _dir(self, key: BundleKey) -> Path:
        return self.root / key.path

    def current(self, key: BundleKey) -> Optional[CompiledBundle]:
        directory = self._dir(key)
        meta_path = directory / META_FILENAME
        if not meta_path.exists():
            return None
        try:
            meta_text = meta_path.read_text(encoding="utf-8")
            json_path = directory / JSON_FILENAME
            json_text = json_path.read_text(encoding="utf-8") if json_path.exists() else "{}"
            css_path = directory / CSS_FILENAME
            css_text = css_path.read_text(encoding="utf-8") if css_path.exists() else None
        except OSError as e:
            logger.error(f"current: failed to read {directory}: {e}")
            raise BundleSinkError(f"Failed to read bundle {key.path}: {e}") from e
        return _load_bundle(meta_text, json_text, css_text)

    def publish(self, key: BundleKey, bundle: CompiledBundle) -> BundleLocation:
        directory = self._dir(key)
        css_path = directory / CSS_FILENAME
        try:
            directory.mkdir(parents=True, exist_ok=True)
            if bundle.css_content is not None:
                css_path.write_text(bundle.css_content, encoding="utf-8")
            elif css_path.exists():
                css_path.unlink()
            (directory / JSON_FILENAME).write_text(bundle.json_content, encoding="utf-8")
            # Metadata last: current() treats its presence as "bundle complete"
            (directory / META_FILENAME).write_text(_metadata(bundle), encoding="utf-8")
        except OSError as e:
            logger.error(f"publish: failed to write {directory}: {e}")
            raise BundleSinkError(f"Failed to write bundle {key.path}: {e}") from e

        logger.info(f"publish: {key.path} v{bundle.version} -> {directory}")
        return BundleLocation(
            css_url=str(css_path) if bundle.css_content is not None else None,
            json_url=str(directory / JSON_FILENAME),
        )


# ---------------------------------------------------------------------------
# HTTP object store
# ---------------------------------------------------------------------------


class HttpBundleSink:
    """Stores bundles in an HTTP object store (PUT to write, GET to read).

    Objects live at ``{base_url}/{project}/{type}[/{component}]/{file}``.

    Args:
        base_url: Store base URL. Falls back to BUNDLE_STORAGE_URL.
        token: Bearer token. Falls back to BUNDLE_STORAGE_TOKEN; optional.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = BUNDLE_HTTP_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = (base_url or BUNDLE_STORAGE_URL).rstrip("/")
        if not self._base_url:
            raise BundleSinkError(
                "Bundle storage URL not configured. Set BUNDLE_STORAGE_URL environment "
                "variable or pass base_url= to HttpBundleSink()."
            )
        token = token if token is not None else BUNDLE_STORAGE_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpBundleSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _url(self, key: BundleKey, filename: str) -> str:
        return f"{self._base_url}/{key.path}/{filename}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path}: timeout")
            raise BundleSinkError(f"Bundle storage timeout: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path}: {e}")
            raise BundleSinkError(f"Bundle storage connection error: {method} {path}") from e

        if resp.status_code in (401, 403):
            logger.error(f"{method} {path}: status {resp.status_code}")
            raise BundleSinkError(
                f"Bundle storage returned {resp.status_code}. Check BUNDLE_STORAGE_TOKEN."
            )
        return resp

    def _get_text(self, path: str) -> Optional[str]:
        resp = self._request("GET", path)
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            logger.error(f"GET {path}: status {resp.status_code}")
            raise BundleSinkError(
                f"Bundle storage error {resp.status_code}: {resp.text[:200]}"
            )
        return resp.text

    def _put_text(self, path: str, body: str, content_type: str) -> None:
        resp = self._request(
            "PUT", path,
            content=body.encode("utf-8"),
            headers={"Content-Type": content_type},
        )
        if resp.status_code not in (200, 201, 204):
            logger.error(f"PUT {path}: status {resp.status_code}")
            raise BundleSinkError(
                f"Bundle storage error {resp.status_code}: {resp.text[:200]}"
            )

    def current(self, key: BundleKey) -> Optional[CompiledBundle]:
        meta_text = self._get_text(f"/{key.path}/{META_FILENAME}")
        if meta_text is None:
            return None
        json_text = self._get_text(f"/{key.path}/{JSON_FILENAME}") or "{}"
        css_text = None
        if key.type == "global":
            css_text = self._get_text(f"/{key.path}/{CSS_FILENAME}")
        return _load_bundle(meta_text, json_text, css_text)

    def publish(self, key: BundleKey, bundle: CompiledBundle) -> BundleLocation:
        if bundle.css_content is not None:
            self._put_text(f"/{key.path}/{CSS_FILENAME}", bundle.css_content, "text/css")
        self._put_text(f"/{key.path}/{JSON_FILENAME}", bundle.json_content, "application/json")
        self._put_text(f"/{key.path}/{META_FILENAME}", _metadata(bundle), "application/json")

        logger.info(f"publish: {key.path} v{bundle.version} -> {self._base_url}")
        return BundleLocation(
            css_url=self._url(key, CSS_FILENAME) if bundle.css_content is not None else None,
            json_url=self._url(key, JSON_FILENAME),
        )
