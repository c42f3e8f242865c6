# udf_reader/loaders/udf_loader.py
"""
Philips UDF text format (X-ray diffractometers).

Layout::

    SampleIdent,Sample5 ,/
    Title1,Dat2rit program ,/
    ...
    DataAngleRange,   5.0000, 120.0000,/     # x start, x end
    ScanStepSize,    0.020,/                 # x step
    ...
    RawScan
        6234,    6185,    5969,    6129,    6199,    5988,    6046,    5922
        ...
        442/                                 # last value ends with '/'

One fixed-step range per file. Header pairs other than the two axis keys are
kept as metadata in file order.
"""
from __future__ import annotations
from pathlib import Path
import logging
from typing import IO
import numpy as np

from ..core.model import AxisParameters, FixedStepAxis, FormatError, FormatInfo, Scan
from ..core.normalize import (check_data_chars, normalize_data_line, parse_data_values,
                              split_key_val, to_float)

_LOG = logging.getLogger(__name__)

SIGNATURE = "SampleIdent"
SENTINEL_KEY = "RawScan"
ENCODING = "latin-1"

_FORMAT_INFO = FormatInfo(
    ident="philips_udf",
    name="Philips UDF Format",
    extensions=("udf",),
    binary=False,
    multi_range=False,
)


def format_info() -> FormatInfo:
    return _FORMAT_INFO


# ---------- line reading ----------
class _LineReader:
    """Yields decoded lines without their terminator and counts them (1-based)."""

    def __init__(self, stream: IO):
        self.stream = stream
        self.lineno = 0

    def next(self) -> str | None:
        raw = self.stream.readline()
        if not raw:
            return None
        self.lineno += 1
        if isinstance(raw, bytes):
            raw = raw.decode(ENCODING)
        return raw.rstrip("\r\n")


def _lines(stream) -> _LineReader:
    return stream if isinstance(stream, _LineReader) else _LineReader(stream)


# ---------- sniffing ----------
def is_udf(stream: IO) -> bool:
    """True if the stream starts with ``SampleIdent``. Never raises; position is restored."""
    try:
        pos = stream.tell()
    except (OSError, ValueError, AttributeError):
        return False
    try:
        head = stream.read(len(SIGNATURE))
    except (OSError, ValueError, UnicodeDecodeError):
        return False
    finally:
        try:
            stream.seek(pos)
        except (OSError, ValueError):
            pass
    if isinstance(head, bytes):
        return head == SIGNATURE.encode("ascii")
    return head == SIGNATURE


# ---------- header ----------
def _set_start(axis: AxisParameters, value: str) -> AxisParameters:
    # "start, end": only the start feeds the axis
    start_txt = value.split(",", 1)[0]
    return AxisParameters(start=to_float(start_txt, "DataAngleRange"), step=axis.step)


def _set_step(axis: AxisParameters, value: str) -> AxisParameters:
    return AxisParameters(start=axis.start, step=to_float(value, "ScanStepSize"))


_AXIS_KEYS = {
    "DataAngleRange": _set_start,
    "ScanStepSize":   _set_step,
}


def parse_header(stream) -> tuple[AxisParameters, list[tuple[str, str]]]:
    """
    Consume header lines up to and including ``RawScan``.
    Returns the axis parameters and the remaining (key, value) pairs in file order.
    """
    lines = _lines(stream)
    axis = AxisParameters()
    meta: list[tuple[str, str]] = []
    while True:
        line = lines.next()
        if line is None:
            raise FormatError(f"unexpected end of header: no {SENTINEL_KEY!r} line "
                              f"after {lines.lineno} lines")
        try:
            key, val = split_key_val(line)
        except FormatError as e:
            raise FormatError(f"{e} (line {lines.lineno})") from None

        if key == SENTINEL_KEY:
            break
        setter = _AXIS_KEYS.get(key)
        if setter is not None:
            axis = setter(axis, val)
            _LOG.debug("header %s -> start=%g step=%g", key, axis.start, axis.step)
        else:
            meta.append((key, val))
    return axis, meta


# ---------- data block ----------
def parse_samples(stream) -> list[float]:
    """Read counts until end of stream or the first line containing '/'."""
    lines = _lines(stream)
    values: list[float] = []
    while True:
        line = lines.next()
        if line is None:
            break
        norm = normalize_data_line(line)
        check_data_chars(norm, lines.lineno)
        values.extend(parse_data_values(norm))
        if "/" in norm:
            break
    return values


# ---------- assembly ----------
def load_stream(stream: IO, source_path: Path | None = None) -> Scan:
    if not is_udf(stream):
        name = source_path.name if source_path is not None else "stream"
        raise FormatError(f"{name} is not the expected {_FORMAT_INFO.name}")

    lines = _LineReader(stream)
    axis, meta = parse_header(lines)
    values = parse_samples(lines)

    y = np.asarray(values, dtype=np.float64)
    y.setflags(write=False)
    scan = Scan(
        x=FixedStepAxis(start=axis.start, step=axis.step, count=len(values)),
        y=y,
        meta=tuple(meta),
        source_path=source_path,
        loader="udf",
    )
    _LOG.info("loaded %d points (start=%g, step=%g, %d meta entries) from %s",
              scan.count, axis.start, axis.step, len(meta), source_path or "stream")
    return scan


# ---------- public loader ----------
def load(path: Path, cfg: dict | None = None, out_root: Path | None = None) -> list[Scan]:
    """Decode one .udf file. This format holds a single range, so the list has one Scan."""
    path = Path(path)
    with path.open("rb") as f:
        return [load_stream(f, source_path=path)]
