from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Callable

from polyread.errors import EncodingError
from polyread.position import Position

if TYPE_CHECKING:
    from polyread.reader import UTF8Reader

logger = logging.getLogger("polyread.reader")

ErrorCallback = Callable[['UTF8Reader', EncodingError], None]
FatalCallback = Callable[['UTF8Reader', OSError], None]


class ErrorSink:
    """Receiver of recoverable encoding errors.

    The reader calls the sink synchronously, in stream order, for every
    anomaly it skips. Any callable with the same signature can be used
    instead of a sink object.
    """

    def __call__(self, reader: UTF8Reader, error: EncodingError) -> None:
        raise NotImplementedError


class LoggingErrorSink(ErrorSink):
    """Log errors prefixed with the reader's position.

    Without configured handlers, the `logging` module writes warnings
    to stderr.
    """

    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger

    def __call__(self, reader: UTF8Reader, error: EncodingError) -> None:
        self.logger.warning("%s: %s", reader.position, error)


class CollectingErrorSink(ErrorSink):
    """Store errors along with the position at which they were reported."""

    def __init__(self):
        self.errors: list[tuple[Position, EncodingError]] = []

    def __call__(self, reader: UTF8Reader, error: EncodingError) -> None:
        self.errors.append((reader.position.copy(), error))

    def __len__(self):
        return len(self.errors)

    def __iter__(self):
        yield from self.errors


class FatalSink:
    """Receiver of byte source failures.

    Whatever the sink does, the reader raises `FatalReaderError` when the
    sink returns.
    """

    def __call__(self, reader: UTF8Reader, error: OSError) -> None:
        raise NotImplementedError


class LoggingFatalSink(FatalSink):
    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger

    def __call__(self, reader: UTF8Reader, error: OSError) -> None:
        self.logger.critical("%s: %s: %s", reader.name, reader.position, error)
