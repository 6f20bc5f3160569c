from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin


@dataclass
class Position(DataClassJsonMixin):
    """The caret's position in the input text.

    Attributes:
        line: Line number, starts with 1.
        column: Number of characters read on the current line. A byte order
            mark does not count as a character.
        offset: Number of bytes consumed from the beginning of the input,
            including the bytes of invalid sequences.
    """

    line: int = 1
    column: int = 0
    offset: int = 0

    def copy(self) -> 'Position':
        return Position(self.line, self.column, self.offset)

    def __str__(self):
        return f"{self.line}:{self.column}"
