from .age import AgeParseError, render_age, render_ages
from .column_spec import ColumnSpec, ColumnSpecError, ColumnType, InvalidColumnNumber, UnexpectedToken, \
    parse_column_specs
from .records import read_records, split_records
from .table_formatter import Config, TableFormatter, format_row, main, run
from .widths import FieldCountError, consumed_width, rebalance_widths, resolve_widths
