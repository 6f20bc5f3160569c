"""Code point classification.

All predicates accept either an integer code point or a one-character
string.
"""

import unicodedata

from polyread.errors import EndOfInput

BOM = 0xFEFF
REPLACEMENT_CHARACTER = 0xFFFD

# Latin-1 spaces, the rest is covered by the Z category
_LATIN1_SPACES = frozenset((0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x20, 0x85, 0xA0))


def _code(char: int | str) -> int:
    if isinstance(char, str):
        return ord(char)
    return char


def is_letter(char: int | str) -> bool:
    """Check if a character is a letter (underscore or category L)."""
    code = _code(char)
    return code == 0x5F or unicodedata.category(chr(code)).startswith('L')


def is_decimal(char: int | str) -> bool:
    """Check if a character is an ASCII decimal digit."""
    return 0x30 <= _code(char) <= 0x39


def is_whitespace(char: int | str) -> bool:
    code = _code(char)
    if code <= 0xFF:
        return code in _LATIN1_SPACES
    return unicodedata.category(chr(code)).startswith('Z')


def is_replacement_character(char: int | str) -> bool:
    return _code(char) == REPLACEMENT_CHARACTER


def is_bom(char: int | str) -> bool:
    return _code(char) == BOM


def is_eof(error: BaseException | None) -> bool:
    return isinstance(error, EndOfInput)
