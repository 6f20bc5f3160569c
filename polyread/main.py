import logging

from pathlib import Path
from typing import Iterable, Iterator, Optional

from polyread.config import Config, reader_config
from polyread.errors import EncodingError
from polyread.position import Position
from polyread.reader import Char, UTF8Reader
from polyread.sinks import CollectingErrorSink

logging.basicConfig(format="{name}: {message}", style="{")
logger = logging.getLogger("polyread")


def create_reader(stream,
                  config: Optional[Config] = None,
                  *,
                  verbose=False) -> UTF8Reader:
    """Create a reader configured by the reader options."""
    if verbose:
        logger.setLevel(logging.INFO)
    if config is None:
        config = reader_config()

    error = CollectingErrorSink() if config.report == "collect" else None
    reader = UTF8Reader(stream,
                        error=error,
                        bufsize=config.bufsize,
                        name=config.name)
    logger.info("reading %s, bufsize %d", reader.name, reader.bufsize)
    return reader


def scan(reader: UTF8Reader) -> Iterator[Char]:
    """Yield code points until the input is exhausted."""
    yield from reader
    logger.info("%s: %d bytes, %d lines",
                reader.name, reader.offset, reader.line)


def check_file(path: Path,
               options: Iterable[str] = (),
               *,
               verbose=False) -> list[tuple[Position, EncodingError]]:
    """Decode the whole file and return encoding errors found."""
    config = reader_config([*options, "report=collect"])
    with open(path, 'rb') as fin:
        reader = create_reader(fin, config, verbose=verbose)
        for _ in scan(reader):
            pass
    return reader.error.errors


def describe(char: Char) -> str:
    code = f"U+{char.code:04X}"
    return (f"{char.line}:{char.column} {char.offset} {char.size} "
            f"{code} {str(char)!r}")
