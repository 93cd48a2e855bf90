"""Scoped all-or-nothing unit of work.

Every mutation done inside ``with Transaction(...) as tx:`` registers the
action that undoes it.  Leaving the block normally commits (the undo log
is dropped); leaving it with an exception runs the undo actions in
reverse order and lets the exception propagate.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Callable

import structlog

logger = structlog.get_logger(__name__)


class Transaction:

    def __init__(self, name: str) -> None:
        self._name = name
        self._compensations: list[tuple[str, Callable[..., Any], tuple[Any, ...]]] = []
        self._active = False

    def __enter__(self) -> Transaction:
        if self._active:
            raise RuntimeError(f"Transaction '{self._name}' is already open")
        self._active = True
        self._compensations = []
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self._active = False
        if exc_type is None:
            self._compensations = []
            return False

        self._roll_back(exc)
        return False

    def on_rollback(self, label: str, action: Callable[..., Any], *args: Any) -> None:
        """Register how to undo a mutation that has just succeeded."""
        if not self._active:
            raise RuntimeError(f"Transaction '{self._name}' is not open")
        self._compensations.append((label, action, args))

    def _roll_back(self, cause: BaseException | None) -> None:
        log = logger.bind(transaction=self._name, cause=type(cause).__name__)
        log.info("Rolling back", steps=len(self._compensations))

        while self._compensations:
            label, action, args = self._compensations.pop()
            try:
                action(*args)
            except Exception:
                # Keep undoing the rest; the original error is what surfaces.
                log.exception("Compensation failed", step=label)
