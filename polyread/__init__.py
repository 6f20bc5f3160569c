__all__ = [
    'BOM',
    'BOM_SIZE',
    'REPLACEMENT_CHARACTER',
    'Char',
    'UTF8Reader',
    'Position',
    'Errors',
    'ReaderError',
    'EncodingError',
    'InvalidBOM',
    'InvalidCodePoint',
    'FatalReaderError',
    'EndOfInput',
    'ErrorSink',
    'FatalSink',
    'LoggingErrorSink',
    'LoggingFatalSink',
    'CollectingErrorSink',
    'is_letter',
    'is_decimal',
    'is_whitespace',
    'is_replacement_character',
    'is_bom',
    'is_eof',
]

from .classify import (
    BOM,
    REPLACEMENT_CHARACTER,
    is_letter,
    is_decimal,
    is_whitespace,
    is_replacement_character,
    is_bom,
    is_eof
)
from .errors import (
    Errors,
    ReaderError,
    EncodingError,
    InvalidBOM,
    InvalidCodePoint,
    FatalReaderError,
    EndOfInput
)
from .position import Position
from .reader import BOM_SIZE, Char, UTF8Reader
from .sinks import (
    ErrorSink,
    FatalSink,
    LoggingErrorSink,
    LoggingFatalSink,
    CollectingErrorSink
)
