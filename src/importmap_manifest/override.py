from __future__ import annotations

import json
import logging
import urllib.request
from typing import Any, cast

from importmap_manifest.diagnostics import Diagnostic, Outcome
from importmap_manifest.paths import is_full_url
from importmap_manifest.utils import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class OverrideFetchError(RuntimeError):
    pass


def fetch_base_import_map(url: str, timeout_s: float | None = DEFAULT_TIMEOUT_S) -> dict[str, Any]:
    logger.info("base import map fetch start url=%s", url)
    request = urllib.request.Request(url, headers={"Accept": "application/json"}, method="GET")
    with urllib.request.urlopen(request, timeout=timeout_s) as response:
        body = response.read()
        status = getattr(response, "status", None)
    payload = json.loads(body.decode("utf-8"))
    if not isinstance(payload, dict):
        raise OverrideFetchError(f"expected a JSON object, got {type(payload).__name__}")
    logger.info("base import map fetch done url=%s status=%s", url, status)
    return cast(dict[str, Any], payload)


def apply_override(
    import_map: dict[str, Any],
    url: str | None,
    *,
    timeout_s: float | None = DEFAULT_TIMEOUT_S,
) -> Outcome[dict[str, Any]]:
    if not url:
        return Outcome(value=import_map)
    if not is_full_url(url):
        diagnostic = Diagnostic(
            kind="config",
            option="base_import_map",
            message=f"malformed URL for base import map (URL must include protocol): {url}",
        )
        logger.warning("%s", diagnostic)
        return Outcome(value=import_map, diagnostics=[diagnostic])
    try:
        base = fetch_base_import_map(url, timeout_s)
    except (OSError, ValueError, OverrideFetchError) as exc:
        diagnostic = Diagnostic(
            kind="network",
            option="base_import_map",
            message=f"unable to download the base import map from {url}: {exc}",
        )
        logger.warning("%s", diagnostic)
        return Outcome(value=import_map, diagnostics=[diagnostic])
    return Outcome(value=deep_merge(base, import_map))
