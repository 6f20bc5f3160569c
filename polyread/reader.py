from __future__ import annotations

import io
import logging

from typing import Optional

from polyread.classify import BOM, REPLACEMENT_CHARACTER
from polyread.errors import (
    EncodingError,
    InvalidBOM,
    InvalidCodePoint,
    FatalReaderError,
    EndOfInput
)
from polyread.position import Position
from polyread.sinks import (
    ErrorCallback,
    FatalCallback,
    LoggingErrorSink,
    LoggingFatalSink
)

logger = logging.getLogger("polyread.reader")

# Encoded size of the byte order mark
BOM_SIZE = 3

NEWLINE = 0x0A

_DEFAULT_ERROR_SINK = LoggingErrorSink()
_DEFAULT_FATAL_SINK = LoggingFatalSink()


def _lead(byte: int) -> Optional[tuple[int, int, int, int]]:
    """Describe a sequence by its leading byte.

    Return the number of continuation bytes, the bounds of the first
    continuation byte and the payload bits of the leading byte, or None
    if the byte cannot start a sequence.
    """
    if 0xC2 <= byte <= 0xDF:
        return 1, 0x80, 0xBF, byte & 0x1F
    if 0xE0 <= byte <= 0xEF:
        if byte == 0xE0:
            # overlong forms
            return 2, 0xA0, 0xBF, byte & 0x0F
        if byte == 0xED:
            # surrogate halves
            return 2, 0x80, 0x9F, byte & 0x0F
        return 2, 0x80, 0xBF, byte & 0x0F
    if 0xF0 <= byte <= 0xF4:
        if byte == 0xF0:
            return 3, 0x90, 0xBF, byte & 0x07
        if byte == 0xF4:
            # above U+10FFFF
            return 3, 0x80, 0x8F, byte & 0x07
        return 3, 0x80, 0xBF, byte & 0x07
    return None


def decode_rune(data: bytes, start: int = 0) -> tuple[int, int]:
    """Decode one code point from `data` at index `start`.

    Return the code point and its size in bytes. A malformed or truncated
    sequence decodes into U+FFFD of size 1, so the decoding resumes at
    the very next byte. `data` must hold at least one byte past `start`.
    """
    byte = data[start]
    if byte < 0x80:
        return byte, 1

    lead = _lead(byte)
    if lead is None:
        return REPLACEMENT_CHARACTER, 1

    need, lo, hi, code = lead
    end = len(data)
    for i in range(1, need + 1):
        if start + i >= end:
            return REPLACEMENT_CHARACTER, 1
        byte = data[start + i]
        if not lo <= byte <= hi:
            return REPLACEMENT_CHARACTER, 1
        code = code << 6 | byte & 0x3F
        lo, hi = 0x80, 0xBF

    return code, need + 1


def full_rune(data: bytes, start: int = 0) -> bool:
    """Check if `data` holds enough bytes at `start` to decode a code point.

    Truncated sequences that are already known to be invalid count as
    full, since decoding them does not depend on the following bytes.
    """
    available = len(data) - start
    if available <= 0:
        return False

    lead = _lead(data[start])
    if lead is None:
        return True

    need, lo, hi, _ = lead
    if available > need:
        return True
    for i in range(1, available):
        if not lo <= data[start + i] <= hi:
            return True
        lo, hi = 0x80, 0xBF
    return False


class Char(str):
    """A code point read from the input.

    Position attributes describe where the code point starts: `column` is
    the number of characters preceding it on its line, `offset` is the
    number of bytes preceding it in the input.
    """

    def __new__(cls,
                value: str,
                size: int,
                line: int,
                column: int,
                offset: int,
                filename: Optional[str] = None):
        self = super().__new__(cls, value)
        self.size = size
        self.line = line
        self.column = column
        self.offset = offset
        self.filename = filename
        return self

    @property
    def code(self) -> int:
        return ord(self)

    @property
    def end(self) -> int:
        return self.offset + self.size

    def __repr__(self):
        return (f"Char({str(self)!r}, {self.size}, {self.line}, "
                f"{self.column}, {self.offset})")


class UTF8Reader:
    """
    Reads UTF-8 code points from a byte source and keeps track of the
    caret's position.

    The reader skips byte order marks and invalid sequences. Out of place
    byte order marks and invalid sequences are reported to the `error`
    sink, a byte order mark at the very beginning of the input is skipped
    silently. I/O errors are not recovered from: they are reported to the
    `fatal_error` sink, and then `FatalReaderError` is raised.

    Both sinks can be replaced at any time. When a sink is None, the
    default one is used: errors are logged with the `polyread.reader`
    logger.

    The reader is not thread safe.
    """

    def __init__(self,
                 source: bytes | str | io.IOBase,
                 *,
                 error: Optional[ErrorCallback] = None,
                 fatal_error: Optional[FatalCallback] = None,
                 bufsize: int = 4096,
                 name: Optional[str] = None):
        if bufsize < 1:
            raise ValueError(f"bufsize must be positive, got {bufsize}")

        self.buffer = b""
        self.stream = None
        self.name = name
        self.bufsize = bufsize
        self.drained = True
        self.eof = False
        self.failed: Optional[OSError] = None
        self.pointer = 0

        self.error = error
        self.fatal_error = fatal_error
        self.position = Position(line=1, column=0, offset=0)

        if isinstance(source, str):
            self.name = name or "<string>"
            self.buffer = source.encode("UTF-8")
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self.name = name or "<bytes>"
            self.buffer = bytes(source)
        elif isinstance(source, io.TextIOBase):
            raise TypeError("reader requires a binary stream")
        elif hasattr(source, "read"):
            self.name = name or str(getattr(source, "name", "<stream>"))
            self.stream = source
            self.drained = False

            readable = getattr(source, "readable", None)
            if readable is not None and not readable():
                raise ValueError(f"stream must be readable: {self.name}")
        else:
            tp = type(source).__name__
            raise TypeError(f"unsupported source type: {tp}")

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def offset(self) -> int:
        return self.position.offset

    def __iter__(self) -> UTF8Reader:
        return self

    def __next__(self) -> Char:
        try:
            return self.read()
        except EndOfInput:
            raise StopIteration

    def read(self) -> Char:
        """Read the next meaningful code point.

        Byte order marks and replacement characters are never returned:
        the ones that carry an error are reported to the error sink, and
        reading continues until any other code point is found.

        Raises:
            EndOfInput: The input is exhausted.
            FatalReaderError: The byte source failed.
        """
        pos = self.position
        start = pos.line, pos.column, pos.offset
        code, size, error = self.read_rune_and_count()

        while code == BOM or code == REPLACEMENT_CHARACTER:
            if error is not None:
                self._report_error(error)
            start = pos.line, pos.column, pos.offset
            code, size, error = self.read_rune_and_count()

        return Char(chr(code), size, *start, filename=self.name)

    def read_rune_and_count(self) -> tuple[int, int, Optional[EncodingError]]:
        """Read one code point and update the caret's position.

        The offset is advanced by the size of the code point, even if it
        is invalid. A new line character increments the line counter and
        resets the column. A byte order mark does not move the column.
        Anything else, including replacement characters, moves the column
        by one, regardless of the number of bytes or the visual width.

        Errors are returned, not reported: the byte order mark is an error
        unless it is the first code point of the input, the replacement
        character always is.

        Returns:
            Code point, its size in bytes and an encoding error, if any.

        Raises:
            EndOfInput: The input is exhausted. The position is unchanged.
            FatalReaderError: The byte source failed.
        """
        code, size = self._decode()

        pos = self.position
        pos.offset += size
        error = None

        if code == NEWLINE:
            pos.line += 1
            pos.column = 0
        elif code == BOM:
            if pos.offset != BOM_SIZE:
                error = InvalidBOM(pos.offset - size, size)
        elif code == REPLACEMENT_CHARACTER:
            error = InvalidCodePoint(pos.offset - size, size)
            pos.column += 1
        else:
            pos.column += 1

        return code, size, error

    def _decode(self) -> tuple[int, int]:
        self._check_failed()
        if not full_rune(self.buffer, self.pointer):
            self.update()
        if self.pointer >= len(self.buffer):
            if not self.eof:
                logger.debug("%s: end of input at %s",
                             self.name, self.position)
            self.eof = True
            raise EndOfInput
        code, size = decode_rune(self.buffer, self.pointer)
        self.pointer += size
        return code, size

    def update(self) -> None:
        """Read from the source until a whole sequence is buffered.

        Stops early if the source is exhausted. Only blocking streams are
        supported: a stream that returns None has no data ready, which is
        rejected with ValueError.
        """
        self._check_failed()
        if self.drained:
            return
        self.buffer = self.buffer[self.pointer:]
        self.pointer = 0
        while not full_rune(self.buffer):
            try:
                data = self.stream.read(self.bufsize)
            except OSError as e:
                self._report_fatal_error(e)
            if isinstance(data, str):
                raise TypeError("reader requires a binary stream")
            if data is None:
                raise ValueError(f"non-blocking streams are not "
                                 f"supported: {self.name}")
            if data:
                self.buffer += data
            else:
                self.drained = True
                break

    def _check_failed(self) -> None:
        # a failed source is never read again, nor reported twice
        if self.failed is not None:
            raise FatalReaderError(f"{self.name}: {self.failed}") \
                from self.failed

    def _report_error(self, error: EncodingError) -> None:
        sink = self.error if self.error is not None else _DEFAULT_ERROR_SINK
        sink(self, error)

    def _report_fatal_error(self, error: OSError):
        sink = self.fatal_error
        if sink is None:
            sink = _DEFAULT_FATAL_SINK
        self.failed = error
        sink(self, error)
        raise FatalReaderError(f"{self.name}: {error}") from error
