from __future__ import annotations

from abc import ABC, abstractmethod


class ISelectionStorage(ABC):
    """Durable string key/value storage for operator selection."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_item(self, key: str) -> None:
        raise NotImplementedError
