from enum import StrEnum


class Errors(StrEnum):
    INVALID_BOM = "invalid-bom"
    INVALID_CODE_POINT = "invalid-code-point"


class ReaderError(Exception):
    """Base class for reader errors."""


class EncodingError(ReaderError):
    """Recoverable encoding anomaly.

    The reader reports these errors to its error sink and skips the
    offending bytes, so they are never raised to the reader's caller.

    Attributes:
        what: Error kind.
        offset: Byte offset at which the offending sequence starts.
        size: Length of the offending sequence in bytes.
    """

    what: Errors

    def __init__(self, offset: int, size: int):
        self.offset = offset
        self.size = size
        super().__init__(self.message())

    def message(self) -> str:
        raise NotImplementedError


class InvalidBOM(EncodingError):
    what = Errors.INVALID_BOM

    def message(self) -> str:
        return f"invalid BOM at position {self.offset}"


class InvalidCodePoint(EncodingError):
    what = Errors.INVALID_CODE_POINT

    def message(self) -> str:
        return f"invalid unicode code point U+FFFD at position {self.offset}"


class FatalReaderError(ReaderError):
    """The byte source failed.

    Raised after the fatal error sink has been notified. Every later read
    raises it again without touching the source or notifying the sink.
    """


class EndOfInput(EOFError):
    """Input is exhausted.

    Signals the normal termination of the stream, it is never reported
    to the error sink.
    """
