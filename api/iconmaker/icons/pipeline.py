from __future__ import annotations

import http.client
import json
import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import GatewayError, QuotaExceeded, RateLimited
from .models import IconSpec
from .prompt_builder import build_icon_prompt

_logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_API_BASE = "https://ai.gateway.lovable.dev/v1"
DEFAULT_IMAGE_MODEL = "google/gemini-3-pro-image-preview"


@dataclass(frozen=True)
class IconGatewayConfig:
    api_base: str
    image_model: str
    timeout_s: float


def get_icon_gateway_config() -> IconGatewayConfig:
    try:
        timeout_s = float(os.environ.get("ICON_GATEWAY_TIMEOUT_S", "120").strip() or "120")
    except ValueError:
        timeout_s = 120.0
    return IconGatewayConfig(
        api_base=(os.environ.get("ICON_GATEWAY_API_BASE", DEFAULT_GATEWAY_API_BASE).strip() or DEFAULT_GATEWAY_API_BASE).rstrip("/"),
        image_model=os.environ.get("ICON_IMAGE_MODEL", DEFAULT_IMAGE_MODEL).strip() or DEFAULT_IMAGE_MODEL,
        timeout_s=timeout_s,
    )


def _require_gateway_api_key() -> str:
    key = os.environ.get("ICON_GATEWAY_API_KEY", "").strip()
    if not key:
        raise GatewayError(500, "ICON_GATEWAY_API_KEY is not set")
    return key


def _post_gateway_json(cfg: IconGatewayConfig, path: str, payload: dict[str, Any]) -> dict[str, Any]:
    api_key = _require_gateway_api_key()
    req = Request(
        f"{cfg.api_base}{path}",
        data=json.dumps(payload).encode("utf-8"),
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        method="POST",
    )
    try:
        with urlopen(req, timeout=cfg.timeout_s) as resp:  # nosec - backend service call
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        body = e.read().decode("utf-8", errors="replace") if hasattr(e, "read") else ""
        _logger.error("AI gateway error: HTTP %s %s", e.code, body[:400])
        if e.code == RateLimited.status_code:
            raise GatewayError(e.code, RateLimited.default_message) from e
        if e.code == QuotaExceeded.status_code:
            raise GatewayError(e.code, QuotaExceeded.default_message) from e
        raise GatewayError(500, f"AI gateway error: {e.code}") from e
    except (URLError, OSError, http.client.HTTPException) as e:
        raise GatewayError(500, f"AI gateway request failed: {e!r}") from e

    try:
        obj = json.loads(raw)
    except ValueError as e:
        raise GatewayError(500, "AI gateway response was not valid JSON") from e
    if not isinstance(obj, dict):
        raise GatewayError(500, "AI gateway response was not a JSON object")
    return obj


def _first_image_url(data: dict[str, Any]) -> str:
    choices = data.get("choices") or []
    first = choices[0] if choices and isinstance(choices[0], dict) else {}
    msg = first.get("message") if isinstance(first.get("message"), dict) else {}
    images = msg.get("images") or []
    image = images[0] if images and isinstance(images[0], dict) else {}
    image_url = image.get("image_url") if isinstance(image.get("image_url"), dict) else {}
    return str(image_url.get("url") or "").strip()


def generate_icon_image(spec: IconSpec) -> str:
    """Generate an icon through the AI gateway and return its image URL (usually a data URL)."""
    cfg = get_icon_gateway_config()
    prompt = build_icon_prompt(spec)
    payload = {
        "model": cfg.image_model,
        "messages": [{"role": "user", "content": prompt}],
        "modalities": ["image", "text"],
    }

    _logger.info("Generating icon via %s for %r", cfg.image_model, spec.description[:80])
    data = _post_gateway_json(cfg, "/chat/completions", payload)
    image_url = _first_image_url(data)
    if not image_url:
        _logger.error("No image in AI gateway response")
        raise GatewayError(500, "No image generated")
    return image_url
