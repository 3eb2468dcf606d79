"""On-screen notification queue.

Notifications are fire-and-forget: producers post a text with a priority and
a lifetime counted in frontend ticks, and the frontend pulls the current
message once per tick.
"""

import logging
from typing import NamedTuple, Protocol

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 1
DEFAULT_DURATION = 180


class MessageSink(Protocol):
    def post_message(self, text: str, priority: int = DEFAULT_PRIORITY, duration: int = DEFAULT_DURATION,
                     transient: bool = True) -> None:
        ...


class Message(NamedTuple):
    text: str
    priority: int
    duration: int


class MessageQueue:
    """Priority queue of messages with tick-based lifetimes.

    A transient post replaces everything still pending, so progress updates do
    not pile up behind each other.
    """

    def __init__(self, capacity: int = 8):
        self._capacity = capacity
        self._pending: list[Message] = []
        self._posted: list[str] = []

    def post_message(self, text: str, priority: int = DEFAULT_PRIORITY, duration: int = DEFAULT_DURATION,
                     transient: bool = True) -> None:
        """Queue text for display.

        Args:
            text: Message shown to the user
            priority: Higher wins when the queue is full
            duration: Number of pull() ticks the message stays current
            transient: Replace whatever is still pending
        """
        logger.info(text)
        self._posted.append(text)

        if transient:
            self._pending.clear()

        if len(self._pending) >= self._capacity:
            # drop the least important message to make room
            self._pending.sort(key=lambda m: m.priority)
            if self._pending[0].priority > priority:
                return
            self._pending.pop(0)

        self._pending.append(Message(text, priority, duration))

    def pull(self) -> str | None:
        """Current message for this tick, or None when nothing is pending.

        The highest priority message wins; among equals the oldest. Each pull
        consumes one tick of its lifetime.
        """
        if not self._pending:
            return None

        index = max(range(len(self._pending)), key=lambda i: (self._pending[i].priority, -i))
        message = self._pending[index]
        if message.duration <= 1:
            del self._pending[index]
        else:
            self._pending[index] = message._replace(duration=message.duration - 1)
        return message.text

    def clear(self):
        self._pending.clear()

    @property
    def posted(self) -> list[str]:
        """Every text posted so far, in order."""
        return self._posted

    def __len__(self) -> int:
        return len(self._pending)
