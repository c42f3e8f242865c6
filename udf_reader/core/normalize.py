# udf_reader/core/normalize.py
from __future__ import annotations
from .model import FormatError

# C-locale classes; str.isdigit()/isspace() would also accept non-ASCII characters
_DATA_CHARS = frozenset("0123456789" + " \t\n\r\v\f" + "/")


def split_key_val(line: str) -> tuple[str, str]:
    """
    Split a header line ``key, val1[, val2 ...] ,/`` into (key, value).

    The value is everything between the first and the last comma, so a
    multi-number value such as ``5.0000, 120.0000`` stays in one piece.
    A line without any comma is a bare key with an empty value.
    """
    pos1 = line.find(",")
    if pos1 < 0:
        return line.strip(), ""
    pos2 = line.rfind(",")
    if pos2 == pos1:
        raise FormatError(f"corrupt header line: {line!r}")
    return line[:pos1].strip(), line[pos1 + 1:pos2].strip()


def to_float(text: str, field: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise FormatError(f"cannot parse {field} value {text!r} as a number") from None


def normalize_data_line(line: str) -> str:
    # comma and whitespace are equivalent separators in the data block
    return line.replace(",", " ")


def check_data_chars(line: str, lineno: int | None = None) -> None:
    for ch in line:
        if ch not in _DATA_CHARS:
            where = f" (line {lineno})" if lineno is not None else ""
            raise FormatError(f"unexpected character {ch!r} in data block{where}")


def parse_data_values(line: str) -> list[float]:
    """Numbers before the first '/' of an already validated data line."""
    body = line.split("/", 1)[0]
    return [float(tok) for tok in body.split()]
