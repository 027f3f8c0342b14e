from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.adapters.settings import TransitRuntimeConfig
from src.app.ports.output import ISelectionStorage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InMemorySelectionStorage(ISelectionStorage):
    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass(slots=True)
class JsonFileSelectionStorage(ISelectionStorage):
    """Plain string keys stored in one JSON object on disk.

    Env vars:
      - OPERATOR_SELECTION_PATH (default data/operator_selection.json)
    """

    path: str | Path | None = None

    def _path(self) -> Path:
        return Path(self.path or TransitRuntimeConfig.from_env().selection_path)

    def _read(self) -> dict[str, str]:
        p = self._path()
        if not p.exists():
            return {}
        try:
            with p.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except json.JSONDecodeError:
            logger.warning("Selection file %s is corrupt; starting empty", p)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        p = self._path()
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.with_suffix(p.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fp:
            json.dump(data, fp, ensure_ascii=False)
        tmp.replace(p)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
