from __future__ import annotations

import json
import os
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from .models import IconSpec, SavedIcon

LIBRARY_KEY = "iconLibrary"
DEFAULT_LIBRARY_PATH = "icon_library.json"

_FILE_LOCK = threading.Lock()
_LIBRARY_LOCK = threading.Lock()


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """String values kept in one JSON object on disk; writes replace the file atomically."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        obj = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(obj, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return {str(k): str(v) for k, v in obj.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".library-", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with _FILE_LOCK:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with _FILE_LOCK:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


def get_library_path() -> Path:
    return Path(os.environ.get("ICON_LIBRARY_PATH", DEFAULT_LIBRARY_PATH).strip() or DEFAULT_LIBRARY_PATH)


class IconLibrary:
    """Saved icons, stored as one JSON list under a single key."""

    def __init__(self, store: KeyValueStore, *, key: str = LIBRARY_KEY) -> None:
        self.store = store
        self.key = key

    def icons(self) -> list[SavedIcon]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        rows = json.loads(raw)
        if not isinstance(rows, list):
            return []
        return [SavedIcon.model_validate(r) for r in rows if isinstance(r, dict)]

    def _write(self, icons: list[SavedIcon]) -> None:
        self.store.set(self.key, json.dumps([i.model_dump(by_alias=True) for i in icons], ensure_ascii=False))

    def get(self, icon_id: str) -> SavedIcon | None:
        for icon in self.icons():
            if icon.id == icon_id:
                return icon
        return None

    def save(self, *, name: str, spec: IconSpec, image_url: str) -> SavedIcon:
        name = (name or "").strip()
        image_url = (image_url or "").strip()
        if not name or not image_url:
            raise ValueError("Please generate an icon and enter a name")

        icon = SavedIcon(
            id=str(uuid.uuid4()),
            name=name,
            description=spec.description,
            image_url=image_url,
            background_color=spec.background_color,
            foreground_color=spec.foreground_color,
            size=spec.size,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with _LIBRARY_LOCK:
            icons = self.icons()
            icons.append(icon)
            self._write(icons)
        return icon

    def delete(self, icon_id: str) -> bool:
        with _LIBRARY_LOCK:
            icons = self.icons()
            kept = [i for i in icons if i.id != icon_id]
            if len(kept) == len(icons):
                return False
            self._write(kept)
        return True

    def clear(self) -> None:
        self.store.delete(self.key)

    def search(self, query: str) -> list[SavedIcon]:
        q = (query or "").strip().lower()
        icons = self.icons()
        if not q:
            return icons
        return [i for i in icons if q in i.name.lower() or q in i.description.lower()]


def default_library() -> IconLibrary:
    return IconLibrary(JsonFileStore(get_library_path()))
