"""Operator-facing notices and the loading indicator capability."""

from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
import logging
import threading
from typing import Any, Callable, Iterator, Protocol, TypeVar

from pubconfig.core.types import NoticeLevel

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOG_LEVELS: dict[str, int] = {
    "success": logging.INFO,
    "info": logging.INFO,
    "error": logging.WARNING,
}


@dataclass(frozen=True, slots=True)
class Notice:
    message: str
    level: NoticeLevel = "info"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "level": self.level}


class Notifier(Protocol):
    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        ...

    def with_loading(self, operation: Callable[[], T]) -> T:
        ...


class NoticeBoard:
    """Collects transient notices until the shell drains them."""

    def __init__(self, *, max_notices: int = 50) -> None:
        self._notices: deque[Notice] = deque(maxlen=max_notices)
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "notice [%s] %s", level, message)
        with self._lock:
            self._notices.append(Notice(message=message, level=level))

    def pending(self) -> list[Notice]:
        with self._lock:
            return list(self._notices)

    def drain(self) -> list[Notice]:
        with self._lock:
            notices = list(self._notices)
            self._notices.clear()
        return notices

    def with_loading(self, operation: Callable[[], T]) -> T:
        with self._loading():
            return operation()

    @contextmanager
    def _loading(self) -> Iterator[None]:
        with self._lock:
            self._in_flight += 1
        try:
            yield
        finally:
            with self._lock:
                self._in_flight -= 1
