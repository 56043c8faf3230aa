"""Message log shown under the map.

Entries are kept in the order they were added; frontends draw the newest first
and simply stop when the panel is full. Nothing is ever discarded.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Tuple

from .colors import Color, WHITE, as_color

Message = Tuple[str, Color]


class MessageLog:
    def __init__(self, messages: List[Message] | None = None):
        self._messages: List[Message] = list(messages or [])

    def add(self, text: str, color: Color = WHITE) -> None:
        self._messages.append((str(text), color))

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageLog):
            return NotImplemented
        return self._messages == other._messages

    def newest_first(self) -> Iterator[Message]:
        return reversed(self._messages)

    def texts(self) -> List[str]:
        return [text for text, _ in self._messages]

    def to_list(self) -> List[List[Any]]:
        return [[text, list(color)] for text, color in self._messages]

    @classmethod
    def from_list(cls, rows: List[List[Any]]) -> "MessageLog":
        return cls([(str(text), as_color(color)) for text, color in rows])


__all__ = ["Message", "MessageLog"]
