# udf_reader/utils/detect.py
from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass
from typing import Callable, IO, Literal

from ..loaders import udf_loader

DetectedKind = Literal["udf", "unknown"]

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    kind: DetectedKind

# kind -> content sniffer; tried in order, first positive wins
SNIFFERS: dict[str, Callable[[IO], bool]] = {
    "udf": udf_loader.is_udf,
}

def _sniff(p: Path) -> DetectedKind:
    if not p.is_file():
        return "unknown"
    try:
        with p.open("rb") as f:
            for kind, sniff in SNIFFERS.items():
                if sniff(f):
                    return kind
    except OSError:
        return "unknown"
    return "unknown"

def detect_kind(p: Path) -> DetectedKind:
    """
    Classify a single path by content, not by name.
    - starts with 'SampleIdent' -> 'udf' (whatever the extension)
    else                         -> 'unknown' (also for *.udf files that do not sniff)
    """
    return _sniff(p)

def discover_inputs(root: Path, recurse: bool = True) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item (if known).
    If 'root' is a folder -> walk (optionally recursively) and collect sniffable files.
    """
    items: list[DetectedItem] = []
    if root.is_file():
        kind = detect_kind(root)
        if kind != "unknown":
            items.append(DetectedItem(root.resolve(), kind))
        return items

    # folder
    if recurse:
        it = root.rglob("*")
    else:
        it = root.glob("*")

    for p in it:
        if not p.is_file():
            continue
        kind = detect_kind(p)
        if kind != "unknown":
            items.append(DetectedItem(p.resolve(), kind))

    # deterministic ordering
    items.sort(key=lambda x: (x.kind, str(x.path)))
    return items
