import json
from io import BytesIO
from urllib.error import HTTPError

import pytest

from conftest import FakeResponse
from iconmaker.icons import pipeline
from iconmaker.icons.errors import GatewayError
from iconmaker.icons.models import IconSpec
from iconmaker.icons.pipeline import generate_icon_image
from iconmaker.icons.prompt_builder import build_icon_prompt

SPEC = IconSpec(description="a paper plane", background_color="#000000", foreground_color="#ffffff", size=32)


def _gateway_reply(url: str) -> dict:
    return {"choices": [{"message": {"content": "", "images": [{"type": "image_url", "image_url": {"url": url}}]}}]}


def test_prompt_mentions_description_colors_and_size():
    prompt = build_icon_prompt(SPEC)
    assert "- Description: a paper plane" in prompt
    assert "- Background color: #000000" in prompt
    assert "- Foreground/main element color: #ffffff" in prompt
    assert "32x32 pixels" in prompt


def test_missing_api_key():
    with pytest.raises(GatewayError) as info:
        generate_icon_image(SPEC)
    assert info.value.status == 500
    assert "ICON_GATEWAY_API_KEY" in info.value.message


def test_returns_first_image_url(monkeypatch):
    monkeypatch.setenv("ICON_GATEWAY_API_KEY", "secret")
    monkeypatch.setenv("ICON_IMAGE_MODEL", "test-image-model")
    sent = []

    def fake_urlopen(req, timeout=None):
        sent.append(req)
        return FakeResponse(json.dumps(_gateway_reply("data:image/png;base64,AAAA")).encode("utf-8"))

    monkeypatch.setattr(pipeline, "urlopen", fake_urlopen)

    assert generate_icon_image(SPEC) == "data:image/png;base64,AAAA"
    payload = json.loads(sent[0].data.decode("utf-8"))
    assert payload["model"] == "test-image-model"
    assert payload["modalities"] == ["image", "text"]
    assert payload["messages"][0]["content"] == build_icon_prompt(SPEC)
    assert sent[0].full_url.endswith("/chat/completions")


@pytest.mark.parametrize(
    "code,status,fragment",
    [(429, 429, "Rate limit"), (402, 402, "credits"), (503, 500, "AI gateway error: 503")],
)
def test_http_errors_are_classified(monkeypatch, code, status, fragment):
    monkeypatch.setenv("ICON_GATEWAY_API_KEY", "secret")

    def fake_urlopen(req, timeout=None):
        raise HTTPError(req.full_url, code, "err", {}, BytesIO(b"{}"))

    monkeypatch.setattr(pipeline, "urlopen", fake_urlopen)
    with pytest.raises(GatewayError) as info:
        generate_icon_image(SPEC)
    assert info.value.status == status
    assert fragment in info.value.message


def test_reply_without_image(monkeypatch):
    monkeypatch.setenv("ICON_GATEWAY_API_KEY", "secret")
    monkeypatch.setattr(pipeline, "urlopen", lambda req, timeout=None: FakeResponse(b'{"choices": [{"message": {"content": "sorry"}}]}'))
    with pytest.raises(GatewayError, match="No image generated"):
        generate_icon_image(SPEC)


def test_connection_reset_is_a_gateway_error(monkeypatch):
    monkeypatch.setenv("ICON_GATEWAY_API_KEY", "secret")

    def fake_urlopen(req, timeout=None):
        raise ConnectionResetError(104, "Connection reset by peer")

    monkeypatch.setattr(pipeline, "urlopen", fake_urlopen)
    with pytest.raises(GatewayError) as info:
        generate_icon_image(SPEC)
    assert info.value.status == 500
    assert "AI gateway request failed" in info.value.message


@pytest.mark.parametrize("value,expected", [("30", 30.0), ("soon", 120.0), ("", 120.0)])
def test_gateway_timeout_from_environment(monkeypatch, value, expected):
    monkeypatch.setenv("ICON_GATEWAY_TIMEOUT_S", value)
    assert pipeline.get_icon_gateway_config().timeout_s == expected
