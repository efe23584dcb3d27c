import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from fastapi import Request


@dataclass(frozen=True)
class TrackedError:
    message: str
    error_type: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorTracker:
    """Records unexpected failures.

    One instance is created per application and handed to whoever needs it
    (exception handlers, services), so tests can build their own.
    """

    def __init__(self, logger: logging.Logger | None = None, capacity: int = 100):
        self.logger = logger or logging.getLogger("error_tracking")
        self._events: deque[TrackedError] = deque(maxlen=capacity)

    def track(self, error: BaseException, message: str | None = None, **details: Any) -> TrackedError:
        event = TrackedError(
            message=message or str(error) or type(error).__name__,
            error_type=type(error).__name__,
            details=details,
        )
        self._events.append(event)
        self.logger.error(
            "ERROR_TRACKED",
            extra={
                "error_message": event.message,
                "error_type": event.error_type,
                "details": details,
            },
            exc_info=(type(error), error, error.__traceback__),
        )
        return event

    def recent(self) -> list[TrackedError]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()


def get_error_tracker(request: Request) -> ErrorTracker:
    return request.app.state.error_tracker
