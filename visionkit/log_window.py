"""A plain-text log that collects messages."""

from __future__ import annotations


class LogWindow:
    """Accumulates messages as one block of plain text."""

    def __init__(self):
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def add_log(self, message) -> None:
        """Append ``message`` (text or UTF-8 bytes) as it is, without a newline."""
        if isinstance(message, (bytes, bytearray)):
            message = bytes(message).decode("utf-8", errors="replace")
        self._parts.append(str(message))