from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from .errors import QuotaExceeded, RateLimited, RemoteGenerationFailed
from .models import IconSpec
from .raster import RasterImage
from .remote import fetch_remote_icon, get_remote_config
from .renderer import render_icon

_logger = logging.getLogger(__name__)

IconRenderer = Callable[[IconSpec], RasterImage]


@dataclass(frozen=True, eq=False)
class GenerationResult:
    raster: RasterImage
    source: Literal["remote", "procedural"]
    notice: str = ""


def default_remote() -> IconRenderer | None:
    return fetch_remote_icon if get_remote_config().enabled else None


def generate_icon(
    spec: IconSpec,
    *,
    remote: IconRenderer | None = None,
    fallback: IconRenderer = render_icon,
) -> GenerationResult:
    """
    Try the remote generator, then the procedural renderer.

    Rate-limit and quota errors are re-raised so the caller can show them;
    every other remote failure turns into a procedural render.
    """
    if remote is None:
        return GenerationResult(raster=fallback(spec), source="procedural")

    try:
        return GenerationResult(raster=remote(spec), source="remote")
    except (RateLimited, QuotaExceeded):
        raise
    except RemoteGenerationFailed as e:
        _logger.warning("Remote icon generation failed, using procedural renderer: %s", e)
        return GenerationResult(raster=fallback(spec), source="procedural", notice=str(e))
