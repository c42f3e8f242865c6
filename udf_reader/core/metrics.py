# udf_reader/core/metrics.py
from __future__ import annotations
import numpy as np
from .model import Scan

def scan_metrics(scan: Scan, label: str | None = None) -> dict:
    if label is None:
        label = scan.source_path.name if scan.source_path is not None else ""
    base = {
        "file": label,
        "sample_ident": scan.get_meta("SampleIdent", "") or "",
        "x_start": scan.x.start,
        "x_step": scan.x.step,
        "x_end": round(scan.x.end, 6),
        "n_points": scan.count,
        "n_meta": len(scan.meta),
    }
    if scan.count == 0:
        base.update({"y_min": float("nan"), "y_max": float("nan"), "y_sum": 0.0})
        return base
    y = np.asarray(scan.y, dtype=float)
    base.update({
        "y_min": float(np.min(y)),
        "y_max": float(np.max(y)),
        "y_sum": float(np.sum(y)),
    })
    return base
