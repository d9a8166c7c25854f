"""User-visible notices for git-suggest.

Notices are plain values. The library returns them to the caller and, when a
callback is registered, hands them to it so the caller's UI can display them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NoticeLevel(Enum):
    """Severity of a notice."""

    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    """A message meant for the user.

    Attributes:
        level: Severity of the notice
        message: Human-readable text
        metadata: Additional context data (optional)
    """

    level: NoticeLevel
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)


# Type alias for notice callback functions
NoticeCallback = Callable[[Notice], None]


class Notifier:
    """Helper class for emitting notices."""

    def __init__(self, callback: NoticeCallback | None = None) -> None:
        """Initialize with optional notice callback.

        Args:
            callback: Function to call when a notice is emitted
        """
        self.callback = callback

    def notify(self, notice: Notice) -> Notice:
        """Hand a notice to the callback if one is registered.

        Returns:
            The same notice, so callers can also return it
        """
        if self.callback:
            self.callback(notice)
        return notice

    def error(self, message: str, **kwargs: Any) -> Notice:
        """Emit an ERROR notice.

        Args:
            message: Description of the problem
            **kwargs: Additional metadata
        """
        return self.notify(Notice(NoticeLevel.ERROR, message, kwargs))

