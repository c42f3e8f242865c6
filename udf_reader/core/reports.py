# udf_reader/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Literal, Sequence
import numpy as np
import pandas as pd
from scipy.io import savemat
from .metrics import scan_metrics
from .model import Scan

ReportFormat = Literal["csv", "mat", "both"]

STR_COLUMNS = ["file", "sample_ident"]
NUM_COLUMNS = ["x_start", "x_step", "x_end", "n_points", "y_min", "y_max", "y_sum", "n_meta"]

def build_dataframe(scans: Sequence[Scan]) -> pd.DataFrame:
    """One row per scan, in the given order."""
    rows = [scan_metrics(s) for s in scans]
    return pd.DataFrame(rows, columns=STR_COLUMNS + NUM_COLUMNS)

def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")

def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr

def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with fields matching the CSV columns.
    Strings become cell arrays (Nx1), numerics become double (Nx1).
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct = {name: _to_mat_cellstr(df_out[name].tolist()) for name in STR_COLUMNS}
    for name in NUM_COLUMNS:
        mat_struct[name] = df_out[name].to_numpy(dtype=float).reshape(-1, 1)
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")

def write_report(scans: Sequence[Scan],
                 out_base: Path,
                 title: str,
                 fmt: ReportFormat = "csv",
                 mat_variable: str = "report") -> None:
    """
    Write the scan summary in the requested format.
    - out_base is a *base path without extension* (e.g., .../udf_summary)
    - fmt: "csv" | "mat" | "both"
    - mat_variable: MATLAB variable name of the struct
    """
    if fmt not in ("csv", "mat", "both"):
        raise ValueError(f"unknown report format {fmt!r} (expected csv, mat or both)")
    if not scans:
        return
    df_out = build_dataframe(scans)

    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_suffix(".csv"), title)
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, title)
