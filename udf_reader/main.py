# udf_reader/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys
import yaml

from udf_reader.loaders import udf_loader
from udf_reader.utils.detect import discover_inputs
from udf_reader.core.model import FormatError
from udf_reader.core.reports import write_report

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config.yaml"

# kind -> loader(path, cfg, out_root) -> list[Scan]
REGISTRY = {
    "udf": udf_loader.load,
}

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    # ---------- config ----------
    cfg_path = Path(argv[0]) if argv else DEFAULT_CONFIG
    cfg = load_config(cfg_path)

    log_cfg = cfg.get("logging", {}) or {}
    verbose = bool(log_cfg.get("verbose", True))
    logging.basicConfig(level=str(log_cfg.get("level", "WARNING")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    in_cfg = cfg.get("input", {}) or {}
    in_path = Path(in_cfg.get("path", ".")).resolve()
    recurse = bool(in_cfg.get("recurse", True))
    out_root = Path((cfg.get("output", {}) or {}).get("root", "out")).resolve()

    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")
        print(f"[cfg] output={out_root}")

    # ---------- discover ----------
    detected = discover_inputs(in_path, recurse=recurse)
    if not detected:
        print(f"[INFO] No UDF inputs found under: {in_path}")
        return 0
    if verbose:
        kinds: dict[str, int] = {}
        for d in detected:
            kinds.setdefault(d.kind, 0)
            kinds[d.kind] += 1
        print(f"[detector] found {sum(kinds.values())} inputs → {kinds}")

    # ---------- load ----------
    scans = []
    failed = 0
    for item in detected:
        loader = REGISTRY.get(item.kind)
        if loader is None:
            if verbose:
                print(f"[skip] no loader for {item.kind}: {item.path.name}")
            continue
        if verbose:
            print(f"  [load] {item.kind:6} {item.path.name}")
        try:
            scans.extend(loader(item.path, cfg, out_root))
        except (FormatError, OSError) as e:
            failed += 1
            print(f"[WARN] loader failed for {item.path.name}: {e}")

    if not scans:
        if verbose:
            print("[INFO] No scans loaded; nothing to report.")
        return 1 if failed else 0

    # ---------- report ----------
    rep = cfg.get("reports", {}) or {}
    fmt = str(rep.get("format", "csv")).lower()
    mat_var = str(rep.get("mat_variable", "report"))
    name = str(rep.get("name", "udf_summary"))
    out_root.mkdir(parents=True, exist_ok=True)
    write_report(scans, out_root / name, f"{len(scans)} UDF scan(s)", fmt=fmt, mat_variable=mat_var)

    if verbose:
        print(f"[summary] loaded {len(scans)} scan(s), {failed} failure(s)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
