from __future__ import annotations

import http.client
import json
import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import EncodingFailed, QuotaExceeded, RateLimited, RemoteGenerationFailed
from .models import IconSpec
from .raster import WORKING_SIZE, RasterImage, is_data_url

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteConfig:
    url: str
    api_key: str
    timeout_s: float

    @property
    def enabled(self) -> bool:
        return bool(self.url)


def get_remote_config() -> RemoteConfig:
    try:
        timeout_s = float(os.environ.get("ICON_REMOTE_TIMEOUT_S", "60").strip() or "60")
    except ValueError:
        timeout_s = 60.0
    return RemoteConfig(
        url=os.environ.get("ICON_REMOTE_URL", "").strip(),
        api_key=os.environ.get("ICON_REMOTE_API_KEY", "").strip(),
        timeout_s=timeout_s,
    )


def _error_message(body: str) -> str:
    try:
        obj = json.loads(body)
    except ValueError:
        return ""
    if isinstance(obj, dict):
        return str(obj.get("error") or "").strip()
    return ""


def _post_json(cfg: RemoteConfig, payload: dict[str, Any]) -> dict[str, Any]:
    headers = {"Content-Type": "application/json"}
    if cfg.api_key:
        headers["Authorization"] = f"Bearer {cfg.api_key}"
    req = Request(cfg.url, data=json.dumps(payload).encode("utf-8"), headers=headers, method="POST")
    try:
        with urlopen(req, timeout=cfg.timeout_s) as resp:  # nosec - configured collaborator
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        body = e.read().decode("utf-8", errors="replace") if hasattr(e, "read") else ""
        message = _error_message(body)
        if e.code == RateLimited.status_code:
            raise RateLimited(message) from e
        if e.code == QuotaExceeded.status_code:
            raise QuotaExceeded(message) from e
        raise RemoteGenerationFailed(f"Remote generator failed: HTTP {e.code} {message or body[:200]}") from e
    except (URLError, OSError, http.client.HTTPException) as e:
        raise RemoteGenerationFailed(f"Remote generator unreachable: {e!r}") from e

    try:
        obj = json.loads(raw)
    except ValueError as e:
        raise RemoteGenerationFailed("Remote generator returned invalid JSON") from e
    if not isinstance(obj, dict):
        raise RemoteGenerationFailed("Remote generator response was not a JSON object")
    return obj


def _download(url: str, timeout_s: float) -> bytes:
    try:
        with urlopen(Request(url, method="GET"), timeout=timeout_s) as resp:  # nosec - URL from collaborator
            return resp.read()
    except (URLError, OSError, http.client.HTTPException) as e:
        raise RemoteGenerationFailed(f"Could not fetch generated image: {e!r}") from e


def load_image_url(image_url: str, *, timeout_s: float = 60.0) -> RasterImage:
    """Resolve a data URL or http(s) URL into a working-size raster."""
    image_url = (image_url or "").strip()
    try:
        if is_data_url(image_url):
            raster = RasterImage.from_data_url(image_url)
        elif image_url.startswith(("http://", "https://")):
            raster = RasterImage.from_bytes(_download(image_url, timeout_s))
        else:
            raise RemoteGenerationFailed("Unsupported imageUrl scheme")
    except EncodingFailed as e:
        raise RemoteGenerationFailed(f"Generated image could not be decoded: {e}") from e
    return raster.resized(WORKING_SIZE)


def fetch_remote_icon(spec: IconSpec, *, config: RemoteConfig | None = None) -> RasterImage:
    """
    Ask the remote generator for an icon. Single attempt, no retry.

    Raises RateLimited / QuotaExceeded for HTTP 429 / 402 and
    RemoteGenerationFailed for everything else that goes wrong.
    """
    cfg = config or get_remote_config()
    if not cfg.enabled:
        raise RemoteGenerationFailed("ICON_REMOTE_URL is not set")

    data = _post_json(cfg, spec.remote_payload())
    error = str(data.get("error") or "").strip()
    if error:
        raise RemoteGenerationFailed(f"Remote generator error: {error}")
    image_url = str(data.get("imageUrl") or "").strip()
    if not image_url:
        raise RemoteGenerationFailed("Remote generator response missing imageUrl")

    raster = load_image_url(image_url, timeout_s=cfg.timeout_s)
    _logger.info("Remote icon generated for %r", spec.description[:80])
    return raster
