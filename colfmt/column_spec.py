"""
parses the column specification language, e.g. "1 2 10c-*; 3 7c; 4 age"
each ;-delimited group builds one ColumnSpec, shared by every column number named in that group
"""

import enum
import logging
import re
from dataclasses import dataclass

log = logging.getLogger(__name__)

# ——— Configuration ——————————————————————————————
UNBOUNDED = -1
GROUP_TERMINATOR = ';'
RANGE_SEPARATOR = '-'

COLUMN_NUMBER_PATTERN = re.compile(r'[+-]?[0-9]+', re.ASCII)
EXACT_WIDTH_PATTERN = re.compile(r'([0-9]+)c', re.ASCII)


class ColumnType(enum.Enum):
    TEXT = 'text'
    AGE = 'age'


KEYWORDS = {'age': ColumnType.AGE}


@dataclass(eq=False)
class ColumnSpec:
    width_min: int = 0
    width_max: int = UNBOUNDED  # UNBOUNDED means there is no maximum
    type: ColumnType = ColumnType.TEXT

    def has_flexible_width(self) -> bool:
        """ a rigid column (min == max) is never shrunk to fit the terminal """
        return self.width_max == UNBOUNDED or self.width_max > self.width_min


SpecMapping = dict[int, ColumnSpec]


# ——— Errors ——————————————————————————————————————
class ColumnSpecError(ValueError):
    pass


class InvalidColumnNumber(ColumnSpecError):
    def __init__(self, number: int):
        super().__init__(f"invalid column number: {number}")
        self.number = number


class UnexpectedToken(ColumnSpecError):
    def __init__(self, word: str):
        super().__init__(f"unexpected token: {word!r}")
        self.word = word


# ——— Parsing ————————————————————————————————————
def parse_width(word: str) -> int | None:
    """ '7c' -> 7, '*' -> UNBOUNDED, anything else -> None """
    if word == '*':
        return UNBOUNDED
    if match := EXACT_WIDTH_PATTERN.fullmatch(word):
        return int(match.group(1))
    return None


def parse_width_range(word: str) -> tuple[int, int] | None:
    if word.count(RANGE_SEPARATOR) != 1:
        return None
    lower, upper = (parse_width(bound) for bound in word.split(RANGE_SEPARATOR))
    if lower is None or upper is None:
        return None
    return max(lower, 0), upper  # '*' as a lower bound means no minimum


def apply_token(word: str, spec: ColumnSpec, specs: SpecMapping) -> None:
    # column number like: 6 or 1 or 999. Checked first, so '-3' is a bad column rather than a range
    if COLUMN_NUMBER_PATTERN.fullmatch(word):
        number = int(word)
        if number < 1:
            raise InvalidColumnNumber(number)
        specs[number - 1] = spec
        return

    # column width like: 7c or *
    if (width := parse_width(word)) is not None:
        if width != UNBOUNDED:
            spec.width_min = width
        spec.width_max = width
        return

    # column width range like: 7c-20c or 10c-*
    if (bounds := parse_width_range(word)) is not None:
        log.debug(f"  width range: {bounds}")
        spec.width_min, spec.width_max = bounds
        return

    if word in KEYWORDS:
        spec.type = KEYWORDS[word]
        return

    raise UnexpectedToken(word)


def parse_column_specs(text: str) -> SpecMapping:
    """
    Map zero-based column indices to their ColumnSpec.
    Columns named before the same ';' point at the same ColumnSpec object.
    Raises ColumnSpecError subclasses on bad input.
    """
    specs: SpecMapping = {}
    spec = ColumnSpec()
    for word in text.split():
        log.debug(f"parsing {word!r}")
        ends_group = word.endswith(GROUP_TERMINATOR)
        word = word.removesuffix(GROUP_TERMINATOR)
        if word == GROUP_TERMINATOR:
            ends_group = True  # ";;" is a terminated bare ";"
        elif word:
            apply_token(word, spec, specs)
        if ends_group:
            spec = ColumnSpec()
    return specs
