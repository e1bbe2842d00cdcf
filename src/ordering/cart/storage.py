"""Durable storage behind the Cart Store.

The persisted form is an ordered JSON list of cart lines. A missing or
unreadable file loads as an empty cart.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class CartStorage(ABC):
    @abstractmethod
    def load(self) -> list[dict]:
        ...

    @abstractmethod
    def save(self, lines: list[dict]) -> None:
        ...


class InMemoryCartStorage(CartStorage):
    def __init__(self, lines: list[dict] | None = None) -> None:
        self.lines = [dict(line) for line in lines or []]
        self.saves = 0

    def load(self) -> list[dict]:
        return [dict(line) for line in self.lines]

    def save(self, lines: list[dict]) -> None:
        self.lines = [dict(line) for line in lines]
        self.saves += 1


class JsonFileCartStorage(CartStorage):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("cart_storage_unreadable", path=str(self.path), error=str(exc))
            return []
        if not isinstance(data, list):
            logger.warning("cart_storage_unreadable", path=str(self.path), error="not a list")
            return []
        return [line for line in data if isinstance(line, dict)]

    def save(self, lines: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(lines, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)
