"""Local/global key-value store backed by the `aio` config files.

Layout:
- global: `~/.config/aio` (or `$XDG_CONFIG_HOME/aio`, or `$AIO_CONFIG_FILE`)
- local:  `./.aio`

Both files hold a single JSON object. Dotted keys (`console.org.code`)
address nested objects, so values written here are readable by the
Adobe I/O CLI and vice versa.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from core.config import get_global_config_file, get_local_config_file
from core.errors import ConfigStoreError

Source = Literal["local", "global"]


def _lookup(data: dict[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _assign(data: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    if value is None:
        node.pop(parts[-1], None)
    else:
        node[parts[-1]] = value


class ConfigStore:
    """Reads merge local over global; writes target exactly one layer."""

    def __init__(self, global_path: Path | None = None, local_path: Path | None = None) -> None:
        self._global_path = global_path or get_global_config_file()
        self._local_path = local_path or get_local_config_file()

    @property
    def global_path(self) -> Path:
        return self._global_path

    @property
    def local_path(self) -> Path:
        return self._local_path

    def get(self, key: str, source: Source | None = None) -> Any:
        """Return the most specific stored value for `key`, or None."""

        if source == "global":
            return _lookup(self._load(self._global_path), key)
        if source == "local":
            return _lookup(self._load(self._local_path), key)

        value = _lookup(self._load(self._local_path), key)
        if value is not None:
            return value
        return _lookup(self._load(self._global_path), key)

    def set(self, key: str, value: Any, local: bool = False) -> Path:
        """Write `key` to the local or global file. `None` removes the key."""

        path = self._local_path if local else self._global_path
        data = self._load(path)
        _assign(data, key, value)
        self._save(path, data)
        return path

    def _load(self, path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigStoreError(f"Cannot read config file {path}: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigStoreError(f"Config file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigStoreError(f"Config file {path} must contain a JSON object.")
        return data

    def _save(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
