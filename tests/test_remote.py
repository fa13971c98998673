import http.client
import json
from io import BytesIO
from urllib.error import HTTPError, URLError

import pytest

from conftest import FakeResponse, png_data_url
from iconmaker.icons import remote
from iconmaker.icons.errors import QuotaExceeded, RateLimited, RemoteGenerationFailed
from iconmaker.icons.models import IconSpec
from iconmaker.icons.remote import RemoteConfig, fetch_remote_icon

CFG = RemoteConfig(url="https://icons.example.test/generate-icon", api_key="k", timeout_s=5)
SPEC = IconSpec(description="blue heart", background_color="#112233", foreground_color="#FFFFFF", size=128)


def _http_error(code: int, body: dict) -> HTTPError:
    return HTTPError(CFG.url, code, "error", {}, BytesIO(json.dumps(body).encode("utf-8")))


def _serve(monkeypatch, *, body=None, exc=None, calls=None):
    def fake_urlopen(req, timeout=None):
        if calls is not None:
            calls.append(req)
        if exc is not None:
            raise exc
        return FakeResponse(json.dumps(body).encode("utf-8") if not isinstance(body, bytes) else body)

    monkeypatch.setattr(remote, "urlopen", fake_urlopen)


def test_posts_camel_case_spec_and_decodes_image(monkeypatch):
    calls = []
    _serve(monkeypatch, body={"imageUrl": png_data_url(64)}, calls=calls)

    raster = fetch_remote_icon(SPEC, config=CFG)

    assert raster.size == 512
    assert tuple(raster.pixels[10, 10]) == (200, 30, 30, 255)
    sent = json.loads(calls[0].data.decode("utf-8"))
    assert sent == {"description": "blue heart", "backgroundColor": "#112233", "foregroundColor": "#ffffff", "size": 128}
    assert calls[0].get_header("Authorization") == "Bearer k"


def test_429_is_rate_limited(monkeypatch):
    _serve(monkeypatch, exc=_http_error(429, {"error": "Rate limit exceeded. Please try again later."}))
    with pytest.raises(RateLimited, match="Rate limit"):
        fetch_remote_icon(SPEC, config=CFG)


def test_402_is_quota_exceeded(monkeypatch):
    _serve(monkeypatch, exc=_http_error(402, {}))
    with pytest.raises(QuotaExceeded, match="add credits"):
        fetch_remote_icon(SPEC, config=CFG)


def test_other_http_errors_are_generic_failures(monkeypatch):
    _serve(monkeypatch, exc=_http_error(500, {"error": "upstream down"}))
    with pytest.raises(RemoteGenerationFailed) as info:
        fetch_remote_icon(SPEC, config=CFG)
    assert not isinstance(info.value, (RateLimited, QuotaExceeded))
    assert "upstream down" in str(info.value)


@pytest.mark.parametrize(
    "body",
    [
        {"error": "No image generated"},
        {"imageUrl": ""},
        {},
        {"imageUrl": "data:image/png;base64,aGVsbG8="},
        {"imageUrl": "ftp://example.test/icon.png"},
        b"not json",
        b"[1, 2]",
    ],
)
def test_malformed_responses_fail(monkeypatch, body):
    _serve(monkeypatch, body=body)
    with pytest.raises(RemoteGenerationFailed):
        fetch_remote_icon(SPEC, config=CFG)


def test_network_errors_fail(monkeypatch):
    _serve(monkeypatch, exc=URLError("connection refused"))
    with pytest.raises(RemoteGenerationFailed, match="unreachable"):
        fetch_remote_icon(SPEC, config=CFG)


class _TruncatedResponse(FakeResponse):
    def read(self) -> bytes:
        raise http.client.IncompleteRead(b'{"image', 100)


@pytest.mark.parametrize(
    "exc",
    [ConnectionResetError(104, "Connection reset by peer"), http.client.RemoteDisconnected("closed"), TimeoutError("timed out")],
)
def test_dropped_connections_fail(monkeypatch, exc):
    _serve(monkeypatch, exc=exc)
    with pytest.raises(RemoteGenerationFailed, match="unreachable"):
        fetch_remote_icon(SPEC, config=CFG)


def test_truncated_body_fails(monkeypatch):
    monkeypatch.setattr(remote, "urlopen", lambda req, timeout=None: _TruncatedResponse(b""))
    with pytest.raises(RemoteGenerationFailed, match="unreachable"):
        fetch_remote_icon(SPEC, config=CFG)


def test_reset_while_downloading_image_fails(monkeypatch):
    calls = []

    def fake_urlopen(req, timeout=None):
        calls.append(req.full_url)
        if req.get_method() == "POST":
            return FakeResponse(json.dumps({"imageUrl": "https://cdn.example.test/icon.png"}).encode("utf-8"))
        raise ConnectionResetError(104, "Connection reset by peer")

    monkeypatch.setattr(remote, "urlopen", fake_urlopen)
    with pytest.raises(RemoteGenerationFailed, match="Could not fetch generated image"):
        fetch_remote_icon(SPEC, config=CFG)
    assert calls == [CFG.url, "https://cdn.example.test/icon.png"]


def test_unconfigured_remote_fails_without_calling_out(monkeypatch):
    calls = []
    _serve(monkeypatch, body={}, calls=calls)
    with pytest.raises(RemoteGenerationFailed):
        fetch_remote_icon(SPEC, config=RemoteConfig(url="", api_key="", timeout_s=1))
    assert calls == []


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("ICON_REMOTE_URL", " https://x.test/gen ")
    monkeypatch.setenv("ICON_REMOTE_TIMEOUT_S", "abc")
    cfg = remote.get_remote_config()
    assert cfg.url == "https://x.test/gen"
    assert cfg.enabled
    assert cfg.timeout_s == 60.0
