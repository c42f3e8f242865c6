# udf_reader/core/model.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np
import pandas as pd


class FormatError(ValueError):
    """Input was recognised as a given format but its content is corrupt."""


@dataclass(frozen=True)
class FormatInfo:
    ident: str                    # e.g. "philips_udf"
    name: str                     # display name
    extensions: tuple[str, ...]   # lower case, no dot
    binary: bool
    multi_range: bool


@dataclass(frozen=True)
class AxisParameters:
    start: float = 0.0
    step: float = 0.0


@dataclass(frozen=True)
class FixedStepAxis:
    """Evenly spaced axis: x[i] = start + i * step for i in [0, count)."""
    start: float
    step: float
    count: int

    def value(self, i: int) -> float:
        if not 0 <= i < self.count:
            raise IndexError(f"axis index {i} out of range (count={self.count})")
        return self.start + i * self.step

    def values(self) -> np.ndarray:
        return self.start + self.step * np.arange(self.count, dtype=float)

    @property
    def end(self) -> float:
        return self.start + (self.count - 1) * self.step if self.count else self.start


@dataclass(frozen=True)
class Scan:
    x: FixedStepAxis
    y: np.ndarray                        # float64, read-only, len == x.count
    meta: tuple[tuple[str, str], ...]    # header pairs in file order, duplicates kept
    source_path: Path | None = None      # file on disk, None for in-memory streams
    loader: str = "udf"

    @property
    def count(self) -> int:
        return int(self.y.shape[0])

    def get_meta(self, key: str, default: str | None = None) -> str | None:
        """Last value recorded for ``key`` (header keys may repeat)."""
        for k, v in reversed(self.meta):
            if k == key:
                return v
        return default

    def meta_dict(self) -> dict[str, str]:
        return dict(self.meta)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.x.values(), "y": np.array(self.y, dtype=float)})
