"""
aligns delimited columns (tab-separated by default) read from stdin, sized to fit the terminal
usage: colfmt [-D] [-w WIDTH] [SPEC] < input
SPEC examples: "3 7c" (column 3 exactly 7 wide), "2 10c-*" (column 2 at least 10 wide), "1; 2 age"
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import BinaryIO, TextIO

from .age import render_ages
from .column_spec import ColumnSpecError, SpecMapping, parse_column_specs
from .records import DEFAULT_FIELD_SEPARATOR, DEFAULT_RECORD_SEPARATOR, ENCODING, ENCODING_ERRORS, \
    parse_separator, read_records
from .widths import FieldCountError, rebalance_widths, resolve_widths

log = logging.getLogger(__name__)

# ——— Configuration ——————————————————————————————
DEFAULT_GUTTER = '  '  # 2 spaces
DEFAULT_OUTPUT_RECORD_SEPARATOR = '\n'
LOG_FORMAT = '%(message)s'


@dataclass
class Config:
    debug: bool = False
    terminal_width: int | None = None  # None means there is no limit
    input_record_separator: bytes = DEFAULT_RECORD_SEPARATOR
    input_field_separator: bytes = DEFAULT_FIELD_SEPARATOR
    output_record_separator: str = DEFAULT_OUTPUT_RECORD_SEPARATOR
    output_field_separator: str = DEFAULT_GUTTER


# ——— Utilities ——————————————————————————————————————
def format_row(fields: list[str], widths: list[int], gutter: str = DEFAULT_GUTTER) -> str:
    formatted = []
    for field, width in zip(fields, widths):
        if width == 0:
            continue  # zero-width columns vanish, gutter included
        formatted.append(field[:width].ljust(width))
    return gutter.join(formatted)


def detect_terminal_width(stream: TextIO) -> int | None:
    try:
        return os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, OSError, ValueError) as e:
        log.debug(f"Can't get terminal dimensions: {e}")
        return None


# ——— Formatter class ——————————————————————————————
class TableFormatter:
    def __init__(self, rows: list[list[str]], specs: SpecMapping | None = None,
                 terminal_width: int | None = None, gutter: str = DEFAULT_GUTTER):
        self.rows = rows
        self.specs = specs or {}
        self.terminal_width = terminal_width
        self.gutter = gutter

    def widths(self) -> list[int]:
        widths = resolve_widths(self.rows, self.specs)
        log.debug(f"widths = {widths}")
        if self.terminal_width is not None and self.terminal_width > 0:
            widths = rebalance_widths(widths, self.specs, self.terminal_width)
            log.debug(f"rebalanced = {widths}")
        return widths

    def format(self) -> list[str]:
        widths = self.widths()
        return [format_row(row, widths, self.gutter) for row in self.rows]

    def write(self, out: TextIO, record_separator: str = DEFAULT_OUTPUT_RECORD_SEPARATOR) -> None:
        for line in self.format():
            out.write(line)
            out.write(record_separator)


def run(config: Config, spec_text: str, stdin: BinaryIO, stdout: TextIO) -> int:
    try:
        specs = parse_column_specs(spec_text)
    except ColumnSpecError as e:
        log.error(f"parsing column spec: {e}")
        return 1

    rows = read_records(stdin, config.input_record_separator, config.input_field_separator)
    render_ages(rows, specs)

    formatter = TableFormatter(rows=rows, specs=specs, terminal_width=config.terminal_width,
                               gutter=config.output_field_separator)
    try:
        formatter.write(stdout, config.output_record_separator)
    except FieldCountError as e:
        log.error(str(e))
        return 1
    stdout.flush()
    return 0


# ——— CLI Entry ———————————————————————————————————————
def separator_arg(text: str) -> bytes:
    try:
        return parse_separator(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='colfmt',
        description="Align delimited columns from stdin into a table that fits the terminal."
    )
    parser.add_argument(
        'spec',
        nargs='?',
        default='',
        help='Column specification, e.g. "1 2 10c-*; 3 7c; 4 age"'
    )
    parser.add_argument(
        '-D', '--debug',
        action='store_true',
        help='Send debug messages to stderr'
    )
    parser.add_argument(
        '-w', '--width',
        type=int,
        default=None,
        help='Assume the terminal is this wide (0 disables fitting)'
    )
    parser.add_argument(
        '-r', '--record-separator',
        type=separator_arg,
        default=DEFAULT_RECORD_SEPARATOR,
        help=r'Input record separator byte (default: \n)'
    )
    parser.add_argument(
        '-f', '--field-separator',
        type=separator_arg,
        default=DEFAULT_FIELD_SEPARATOR,
        help=r'Input field separator byte (default: \t)'
    )
    return parser


def configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config(
        debug=args.debug,
        input_record_separator=args.record_separator,
        input_field_separator=args.field_separator,
    )
    configure_logging(config)
    config.terminal_width = args.width if args.width is not None else detect_terminal_width(sys.stdout)

    try:
        # keep undecodable input bytes intact on the way out
        with open(sys.stdout.fileno(), 'w', encoding=ENCODING, errors=ENCODING_ERRORS, newline='',
                  closefd=False) as stdout:
            return run(config, args.spec, sys.stdin.buffer, stdout)
    except BrokenPipeError:
        # the reader went away (e.g. `colfmt | head`); point stdout at devnull so the final flush at exit is quiet
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 1
