# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

import codecs
import io
import locale
from typing import Callable

LINE_TERMINATOR = 0x0A

# Marker for "no encoding argument given", so that an explicit None can be rejected.
DEFAULT_ENCODING = object()


def default_encoding() -> str:
    return locale.getpreferredencoding(False)


class LineRedirectStream(io.RawIOBase):
    """
    A binary file-like object that captures one line of output at a time and hands each
    completed line, decoded as text, to a callback.

    Lines are split on the newline byte only; the terminator is never part of the emitted line.
    Bytes are decoded when the line is emitted, so a multi-byte character may arrive across
    several writes. flush() emits whatever partial line is pending, close() flushes once and
    marks the stream closed.

    As with any io object, a stream that is never closed is closed when it is garbage collected,
    so a pending partial line still reaches the callback then, possibly during interpreter
    shutdown. Close streams explicitly, or use them as context managers, to control when that
    last line is emitted.

    This class is not thread safe and expects to have only one active writer at any given time.
    """

    def __init__(
        self,
        on_line: Callable[[str], None],
        encoding: str | object = DEFAULT_ENCODING,
        errors: str = "replace",
    ):
        super().__init__()
        self._pending = bytearray()
        if on_line is None:
            raise ValueError("on_line callback is required")
        if not callable(on_line):
            raise TypeError(f"on_line must be callable; on_line={on_line!r}")
        if encoding is DEFAULT_ENCODING:
            encoding = default_encoding()
        if encoding is None:
            raise ValueError("encoding must not be None")
        # Fail now rather than on the first emitted line.
        self._encoding = codecs.lookup(encoding).name
        self._errors = errors
        self._on_line = on_line

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def errors(self) -> str:
        return self._errors

    def writable(self) -> bool:
        return True

    def write_byte(self, value: int) -> None:
        """Write a single byte; values outside 0-255 are narrowed to their low eight bits."""
        self._check_open()
        value &= 0xFF
        if value == LINE_TERMINATOR:
            self._emit()
            return
        self._pending.append(value)

    def write(self, b) -> int:
        self._check_open()
        # memoryview() rejects ints, which bytes() would turn into a zero-filled buffer.
        data = memoryview(b).tobytes()
        start = 0
        while True:
            idx = data.find(LINE_TERMINATOR, start)
            if idx < 0:
                break
            self._pending += data[start:idx]
            self._emit()
            start = idx + 1
        self._pending += data[start:]
        return len(data)

    def flush(self) -> None:
        if len(self._pending) > 0:
            self._emit()

    def pending(self) -> bytes:
        """Return a copy of the bytes buffered since the last emitted line."""
        return bytes(self._pending)

    def _emit(self) -> None:
        self._on_line(self._pending.decode(self._encoding, self._errors))
        self._pending = bytearray()

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")


class TextLineWriter(io.TextIOBase):
    """
    A text file-like object that feeds a LineRedirectStream.

    `source_encoding` is the codec the producer used to decode the text it writes here; encoding
    with it again restores the producer's bytes. Passing "latin-1" to both ends makes that
    round trip lossless, so the wrapped stream does the only real decode. When it is None the
    text is encoded with the wrapped stream's own encoding and errors policy.

    Text producers such as invoke flush after every chunk they write, so flush() here does not
    force a partial line out. Closing the writer closes the wrapped stream, which emits any
    unterminated last line.
    """

    def __init__(self, stream: LineRedirectStream, source_encoding: str | None = None):
        super().__init__()
        self.stream = stream
        self.source_encoding = (
            codecs.lookup(source_encoding).name if source_encoding is not None else None
        )

    @property
    def encoding(self) -> str:
        return self.source_encoding or self.stream.encoding

    @property
    def errors(self) -> str:
        return "strict" if self.source_encoding else self.stream.errors

    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        self.stream.write(s.encode(self.encoding, self.errors))
        return len(s)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        if not self.closed:
            self.stream.close()
        super().close()
