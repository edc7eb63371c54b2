"""
splits a byte stream into records and fields
"""

import codecs
from typing import BinaryIO

DEFAULT_RECORD_SEPARATOR = b'\n'
DEFAULT_FIELD_SEPARATOR = b'\t'

# surrogateescape lets undecodable bytes pass through to the output untouched
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


def split_records(data: bytes,
                  record_separator: bytes = DEFAULT_RECORD_SEPARATOR,
                  field_separator: bytes = DEFAULT_FIELD_SEPARATOR) -> list[list[str]]:
    if not data:
        return []
    records = data.split(record_separator)
    if not records[-1]:
        records.pop()  # the last record was terminated; no empty record follows it
    return [
        [field.decode(ENCODING, ENCODING_ERRORS) for field in record.split(field_separator)]
        for record in records
    ]


def read_records(stream: BinaryIO,
                 record_separator: bytes = DEFAULT_RECORD_SEPARATOR,
                 field_separator: bytes = DEFAULT_FIELD_SEPARATOR) -> list[list[str]]:
    return split_records(stream.read(), record_separator, field_separator)


def parse_separator(text: str) -> bytes:
    """ '\\t' or a literal tab -> b'\\t'. The result must be exactly one byte """
    try:
        separator = codecs.decode(text, 'unicode_escape').encode('latin-1')
    except (UnicodeDecodeError, UnicodeEncodeError) as e:
        raise ValueError(f"invalid separator {text!r}: {e}") from e
    if len(separator) != 1:
        raise ValueError(f"separator must be a single byte, got {text!r}")
    return separator
