"""Transient status signals (the toast equivalent)."""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.taskboard.core.logging import get_logger

logger = get_logger(__name__)


class FeedbackLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Feedback:
    level: FeedbackLevel
    message: str
    kind: str | None = None  # TaskboardError.kind for failures
    detail: str | None = None
    link: str | None = None


type FeedbackListener = Callable[[Feedback], None]


class FeedbackChannel:
    """Fan-out of feedback to UI listeners, with a short history."""

    def __init__(self, history: int = 50):
        self._listeners: list[FeedbackListener] = []
        self.recent: deque[Feedback] = deque(maxlen=history)

    def subscribe(self, listener: FeedbackListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, feedback: Feedback) -> None:
        self.recent.append(feedback)
        for listener in list(self._listeners):
            try:
                listener(feedback)
            except Exception:
                logger.exception("Feedback listener failed", level=feedback.level.value)

    def success(self, message: str) -> None:
        self.emit(Feedback(FeedbackLevel.SUCCESS, message))

    def info(self, message: str, *, detail: str | None = None, link: str | None = None) -> None:
        self.emit(Feedback(FeedbackLevel.INFO, message, detail=detail, link=link))

    def error(self, message: str, *, kind: str | None = None) -> None:
        self.emit(Feedback(FeedbackLevel.ERROR, message, kind=kind))

    @property
    def last(self) -> Feedback | None:
        return self.recent[-1] if self.recent else None
