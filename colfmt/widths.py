"""
column width resolution: natural widths from the data, clamped by column specs,
then shrunk to fit the available horizontal space
"""

import logging

from .column_spec import UNBOUNDED, SpecMapping

log = logging.getLogger(__name__)

GUTTER_WIDTH = 2


class FieldCountError(ValueError):
    def __init__(self, row_number: int, expected: int, actual: int):
        super().__init__(
            f"Not all records have the same number of fields: record {row_number} has {actual}, expected {expected}")
        self.row_number = row_number
        self.expected = expected
        self.actual = actual


def check_field_counts(rows: list[list[str]]) -> int:
    """ returns the shared field count, or raises FieldCountError on the first row that disagrees """
    if not rows:
        return 0
    expected = len(rows[0])
    for row_number, row in enumerate(rows, start=1):
        if len(row) != expected:
            raise FieldCountError(row_number, expected, len(row))
    return expected


def resolve_widths(rows: list[list[str]], specs: SpecMapping) -> list[int]:
    widths = [0] * check_field_counts(rows)

    for row in rows:
        for i, field in enumerate(row):
            widths[i] = max(widths[i], len(field))  # largest value found

    for i, width in enumerate(widths):
        if (spec := specs.get(i)) is None:
            continue  # unconstrained
        if width < spec.width_min:
            widths[i] = spec.width_min
        if spec.width_max != UNBOUNDED and width > spec.width_max:
            widths[i] = spec.width_max

    return widths


def consumed_width(widths: list[int]) -> int:
    if not widths:
        return 0
    return sum(widths) + GUTTER_WIDTH * (len(widths) - 1)


def rebalance_widths(widths: list[int], specs: SpecMapping, available_width: int) -> list[int]:
    """
    Shrink elastic columns, one character at a time from the widest, until the row fits in available_width.
    Stops early once every column is at its minimum; unspecified and rigid columns are never touched.
    Ties between equally wide columns go to the lowest index.
    """
    widths = list(widths)
    consumed = consumed_width(widths)

    adjustable = {
        i: spec for i, spec in specs.items()
        if i < len(widths) and spec.has_flexible_width() and widths[i] > spec.width_min
    }

    log.debug(f"rebalancing {consumed} towards {available_width}")
    while consumed > available_width and adjustable:
        widest = max(sorted(adjustable), key=lambda i: widths[i])
        widths[widest] -= 1
        consumed -= 1
        if widths[widest] <= adjustable[widest].width_min:
            del adjustable[widest]

    return widths
