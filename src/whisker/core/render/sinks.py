"""Output sinks used by the renderer.

- BufferSink:     collects text in memory (``render``)
- StreamSink:     writes to a text or binary stream (``render_to``)
- IndentingSink:  prefixes each template line with a partial's indentation
                  (and re-indents block overrides)

Static template text and interpolated values are written through different
methods: only static text starts new template lines, so values containing
newlines are never re-indented.
"""
from __future__ import annotations

import io
from typing import Any, List


class Sink:
    """Base sink. ``written`` counts characters (or bytes for binary streams)."""

    written: int = 0

    def write(self, text: str) -> None:
        """Write an interpolated value."""
        raise NotImplementedError

    def write_static(self, text: str) -> None:
        """Write static template text."""
        self.write(text)


class BufferSink(Sink):
    def __init__(self) -> None:
        self._parts: List[str] = []
        self.written = 0

    def write(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self.written += len(text)

    def getvalue(self) -> str:
        return "".join(self._parts)


def _is_binary(stream: Any) -> bool:
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    if isinstance(stream, io.TextIOBase):
        return False
    return "b" in getattr(stream, "mode", "")


class StreamSink(Sink):
    """Write to a file-like object as rendering proceeds.

    Write failures raised by the stream propagate unchanged and abort the
    render; text already written stays written.
    """

    def __init__(self, stream: Any, encoding: str = "utf-8") -> None:
        self.stream = stream
        self.encoding = encoding
        self.binary = _is_binary(stream)
        self.written = 0

    def write(self, text: str) -> None:
        if not text:
            return
        if self.binary:
            data = text.encode(self.encoding)
            self.stream.write(data)
            self.written += len(data)
        else:
            self.stream.write(text)
            self.written += len(text)


class IndentingSink(Sink):
    """Prefix every template line written through this sink with ``indent``.

    The indentation is emitted lazily at the first write of each line, so
    the line break that ends a partial is not followed by a dangling indent.
    Nested partials stack their sinks, accumulating indentation.

    When ``dedent`` is given, that prefix is first removed from the static
    text opening each line (block overrides move from the indentation of
    their definition to the indentation of the block they replace).
    """

    def __init__(self, inner: Sink, indent: str, dedent: str = "") -> None:
        self.inner = inner
        self.indent = indent
        self.dedent = dedent
        self._line_start = True
        self._pending_dedent = dedent

    @property  # type: ignore[override]
    def written(self) -> int:
        return self.inner.written

    def _begin_line(self) -> None:
        if self._line_start:
            if self.indent:
                self.inner.write_static(self.indent)
            self._line_start = False

    def _strip_dedent(self, text: str, start: int) -> int:
        pending = self._pending_dedent
        matched = 0
        while matched < len(pending) and start + matched < len(text) and text[start + matched] == pending[matched]:
            matched += 1
        end = start + matched
        # A prefix split across writes keeps its unmatched remainder.
        self._pending_dedent = pending[matched:] if end == len(text) else ""
        return end

    def write(self, text: str) -> None:
        if not text:
            return
        self._pending_dedent = ""
        self._begin_line()
        self.inner.write(text)

    def write_static(self, text: str) -> None:
        start = 0
        while start < len(text):
            if self._pending_dedent:
                start = self._strip_dedent(text, start)
                if start == len(text):
                    break
            newline = text.find("\n", start)
            end = len(text) if newline == -1 else newline + 1
            self._begin_line()
            self.inner.write_static(text[start:end])
            if newline != -1:
                self._line_start = True
                self._pending_dedent = self.dedent
            start = end


__all__ = ["Sink", "BufferSink", "StreamSink", "IndentingSink"]
