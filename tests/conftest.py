from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image


def png_data_url(size: int = 64, color: tuple[int, int, int, int] = (200, 30, 30, 255)) -> str:
    buf = BytesIO()
    Image.new("RGBA", (size, size), color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: object) -> None:
        return None


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("ICON_REMOTE_URL", "ICON_REMOTE_API_KEY", "ICON_GATEWAY_API_KEY", "ICONMAKER_API_KEY", "AUTH_DISABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ICON_LIBRARY_PATH", str(tmp_path / "library.json"))
