from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable

from src.app.ports.output import ISelectionStorage
from src.domain.models import DEFAULT_OPERATOR, validate_operator_name

logger = logging.getLogger(__name__)

ACTIVE_OPERATOR_KEY = "selectedOperator"
COMPARISON_OPERATORS_KEY = "selectedOperators"


@dataclass(frozen=True, slots=True)
class OperatorSelection:
    active_operator: str | None
    comparison_operators: tuple[str, ...]


Listener = Callable[[OperatorSelection], None]


def _dedupe(names: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


@dataclass(slots=True)
class OperatorSelectionStore:
    """Selection of the active operator and the comparison set.

    - Loaded from storage once; defaults to the `LUZ` operator.
    - The comparison set is never empty.
    - Every mutation is persisted synchronously, then listeners are notified.
    """

    storage: ISelectionStorage
    default_operator: str = DEFAULT_OPERATOR

    _active: str | None = field(default=None, init=False)
    _comparison: list[str] = field(default_factory=list, init=False)
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        stored_active = self.storage.get_item(ACTIVE_OPERATOR_KEY)
        self._active = stored_active or self.default_operator
        self._comparison = self._load_comparison() or [self.default_operator]
        self._persist()

    def _load_comparison(self) -> list[str]:
        raw = self.storage.get_item(COMPARISON_OPERATORS_KEY)
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed %s value", COMPARISON_OPERATORS_KEY)
            return []
        if not isinstance(decoded, list):
            return []
        return _dedupe([n for n in decoded if isinstance(n, str) and n.strip()])

    @property
    def snapshot(self) -> OperatorSelection:
        return OperatorSelection(
            active_operator=self._active,
            comparison_operators=tuple(self._comparison),
        )

    @property
    def active_operator(self) -> str | None:
        return self._active

    @property
    def comparison_operators(self) -> tuple[str, ...]:
        return tuple(self._comparison)

    def set_active_operator(self, operator: str | None) -> OperatorSelection:
        if operator is not None:
            operator = validate_operator_name(operator)
        self._active = operator
        return self._commit()

    def toggle_comparison_operator(self, operator: str) -> OperatorSelection:
        operator = validate_operator_name(operator)
        if operator in self._comparison:
            if len(self._comparison) == 1:
                # Comparison views need at least one operator.
                return self.snapshot
            self._comparison = [o for o in self._comparison if o != operator]
        else:
            self._comparison = [*self._comparison, operator]
        return self._commit()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _persist(self) -> None:
        if self._active:
            self.storage.set_item(ACTIVE_OPERATOR_KEY, self._active)
        else:
            self.storage.remove_item(ACTIVE_OPERATOR_KEY)
        self.storage.set_item(COMPARISON_OPERATORS_KEY, json.dumps(self._comparison))

    def _commit(self) -> OperatorSelection:
        self._persist()
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot
