"""Incremental decoding of control messages from buffers as they arrive."""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum, auto
from typing import Optional

from ravenwire.decoder import decode_body
from ravenwire.messages import MessageType
from ravenwire.span import NonContiguousSpan
from ravenwire.varint import decode_varint

_SUPPORTED = frozenset(
    {MessageType.CLIENT_SETUP, MessageType.SERVER_SETUP, MessageType.SUBSCRIBE}
)


class _State(Enum):
    READING_MESSAGE_TYPE = auto()
    READING_MESSAGE_LENGTH = auto()
    READING_MESSAGE = auto()


class Deserializer:
    """Collects received buffers and hands each complete message to ``handler``.

    Buffers may split messages at any byte. Every message that becomes
    complete after a call to :meth:`append_buffer` is decoded and passed
    to the handler in the order it arrived.
    """

    def __init__(self, handler: Callable[[object], object]) -> None:
        self._handler = handler
        self._buffers: list[bytes] = []
        self._begin = 0
        self._lock = threading.RLock()
        self._state = _State.READING_MESSAGE_TYPE
        self._message_type = 0
        self._message_length = 0

    def append_buffer(self, buffer) -> None:
        """Add received bytes and decode every message they complete."""
        with self._lock:
            data = bytes(buffer)
            if data:
                self._buffers.append(data)
            self._process()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(buffer) for buffer in self._buffers) - self._begin

    def at(self, index: int) -> int:
        """Return the unread byte at ``index``."""
        with self._lock:
            if not self._buffers:
                raise IndexError("no buffers to read from")
            if index < 0:
                raise IndexError("index out of bounds")
            index += self._begin
            for buffer in self._buffers:
                if index < len(buffer):
                    return buffer[index]
                index -= len(buffer)
            raise IndexError("index out of bounds")

    def _span(self) -> NonContiguousSpan:
        return NonContiguousSpan(self._buffers, self._begin)

    def _consume(self, count: int) -> None:
        self._begin += count
        dropped = 0
        while dropped < len(self._buffers) and self._begin >= len(self._buffers[dropped]):
            self._begin -= len(self._buffers[dropped])
            dropped += 1
        del self._buffers[:dropped]

    def _try_varint(self) -> Optional[int]:
        if len(self) == 0:
            return None
        if len(self) < 1 << (self.at(0) >> 6):
            return None
        value, consumed = decode_varint(self._span())
        self._consume(consumed)
        return value

    def _process(self) -> None:
        while True:
            if self._state is _State.READING_MESSAGE_TYPE:
                value = self._try_varint()
                if value is None:
                    return
                self._message_type = value
                self._state = _State.READING_MESSAGE_LENGTH
            elif self._state is _State.READING_MESSAGE_LENGTH:
                value = self._try_varint()
                if value is None:
                    return
                self._message_length = value
                self._state = _State.READING_MESSAGE
            else:
                if not self._buffers or len(self) < self._message_length:
                    return
                if self._message_type not in {int(t) for t in _SUPPORTED}:
                    raise ValueError(f"unsupported message type: {self._message_type}")
                message, consumed = decode_body(self._message_type, self._span())
                self._consume(consumed)
                self._state = _State.READING_MESSAGE_TYPE
                self._handler(message)