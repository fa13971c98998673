from __future__ import annotations

import os
from typing import Any, Literal

from fastapi import FastAPI, Header, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from iconmaker.icons.errors import EncodingFailed, GatewayError, QuotaExceeded, RateLimited, RemoteGenerationFailed
from iconmaker.icons.export import export_icon
from iconmaker.icons.generator import GenerationResult, default_remote, generate_icon
from iconmaker.icons.glyphs import glyph_table, select_glyph
from iconmaker.icons.library import IconLibrary, default_library
from iconmaker.icons.models import ICON_SIZES, IconSpec
from iconmaker.icons.pipeline import generate_icon_image
from iconmaker.icons.raster import PREVIEW_SIZES, RasterImage, is_data_url, preview_set
from iconmaker.icons.remote import load_image_url
from iconmaker.icons.renderer import render_icon
from iconmaker.icons.suggestions import PROMPT_SUGGESTIONS, SUGGESTION_TIP

app = FastAPI(title="Icon Maker API", docs_url="/docs", redoc_url=None)


def _auth_disabled() -> bool:
    v = os.environ.get("AUTH_DISABLED", "").strip().lower()
    return v in {"1", "true", "yes", "on"}


def _require_api_key(x_api_key: str | None) -> None:
    if _auth_disabled():
        return
    expected = os.environ.get("ICONMAKER_API_KEY", "").strip()
    if not expected:
        raise HTTPException(status_code=500, detail="ICONMAKER_API_KEY is not set")
    if not x_api_key or x_api_key.strip() != expected:
        raise HTTPException(status_code=401, detail="Invalid API key")


def _library() -> IconLibrary:
    return default_library()


def _source_raster(spec: IconSpec, image_url: str) -> RasterImage:
    """Raster behind a client-supplied data URL, or a fresh procedural render."""
    if not image_url:
        return render_icon(spec)
    if not is_data_url(image_url):
        raise EncodingFailed("imageUrl must be a data: URL")
    try:
        return load_image_url(image_url)
    except RemoteGenerationFailed as e:
        raise EncodingFailed(str(e)) from e


def _result_payload(spec: IconSpec, result: GenerationResult) -> dict[str, Any]:
    return {
        "imageUrl": result.raster.to_data_url(),
        "source": result.source,
        "glyph": select_glyph(spec.description).name if result.source == "procedural" else None,
        "notice": result.notice,
    }


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.get("/icons/options")
def icons_options() -> dict[str, Any]:
    return {
        "sizes": [{"value": v, "label": label} for v, label in ICON_SIZES],
        "suggestions": PROMPT_SUGGESTIONS,
        "tip": SUGGESTION_TIP,
        "glyphs": glyph_table(),
    }


@app.post("/icons/render")
def icons_render(body: IconSpec) -> dict[str, Any]:
    return _result_payload(body, generate_icon(body, remote=None))


@app.post("/icons/generate")
def icons_generate(
    body: IconSpec,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> dict[str, Any]:
    _require_api_key(x_api_key)
    if not body.description:
        raise HTTPException(status_code=400, detail="Please enter an icon description")
    try:
        result = generate_icon(body, remote=default_remote())
    except (RateLimited, QuotaExceeded) as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    return _result_payload(body, result)


class PreviewIn(IconSpec):
    image_url: str = ""


@app.post("/icons/preview")
def icons_preview(body: PreviewIn) -> dict[str, Any]:
    try:
        raster = _source_raster(body, body.image_url)
    except EncodingFailed as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return {"sizes": {str(k): v for k, v in preview_set(raster, PREVIEW_SIZES).items()}}


class ExportIn(IconSpec):
    name: str = ""
    format: Literal["png", "ico"] = "png"
    image_url: str = ""


@app.post("/icons/export")
def icons_export(body: ExportIn) -> Response:
    try:
        raster = _source_raster(body, body.image_url)
        exported = export_icon(raster, size=body.size, fmt=body.format, name=body.name)
    except EncodingFailed as e:
        raise HTTPException(status_code=422, detail=f"Failed to create {body.format.upper()} file: {e}") from e

    filename = exported.filename.replace('"', "")
    return Response(
        content=exported.body,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/generate-icon")
def generate_icon_endpoint(
    body: IconSpec,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> Any:
    _require_api_key(x_api_key)
    try:
        image_url = generate_icon_image(body)
    except GatewayError as e:
        return JSONResponse(status_code=e.status, content={"error": e.message})
    return {"imageUrl": image_url}


class SaveIconIn(IconSpec):
    name: str
    image_url: str


@app.get("/library")
def library_list(q: str = Query(default="")) -> dict[str, Any]:
    icons = _library().search(q)
    return {"count": len(icons), "icons": [i.model_dump(by_alias=True) for i in icons]}


@app.post("/library")
def library_save(
    body: SaveIconIn,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> dict[str, Any]:
    _require_api_key(x_api_key)
    spec = IconSpec(
        description=body.description,
        background_color=body.background_color,
        foreground_color=body.foreground_color,
        size=body.size,
    )
    try:
        icon = _library().save(name=body.name, spec=spec, image_url=body.image_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return icon.model_dump(by_alias=True)


@app.get("/library/{icon_id}")
def library_get(icon_id: str) -> dict[str, Any]:
    icon = _library().get(icon_id)
    if icon is None:
        raise HTTPException(status_code=404, detail="Icon not found")
    return icon.model_dump(by_alias=True)


@app.delete("/library/{icon_id}")
def library_delete(
    icon_id: str,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> dict[str, bool]:
    _require_api_key(x_api_key)
    if not _library().delete(icon_id):
        raise HTTPException(status_code=404, detail="Icon not found")
    return {"ok": True}


@app.delete("/library")
def library_clear(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> dict[str, bool]:
    _require_api_key(x_api_key)
    _library().clear()
    return {"ok": True}
