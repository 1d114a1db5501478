from __future__ import annotations

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def log_points(name: str, pts: np.ndarray) -> None:
    """Log count, bounds and finiteness of an (N,2) point array."""
    if not debug.is_verbose():
        return
    flat = pts.reshape(-1, 2) if pts.size else np.zeros((0, 2))
    finite_mask = np.isfinite(flat).all(axis=1)
    finite = flat[finite_mask]
    if finite.shape[0] == 0:
        bounds = "bounds=none"
    else:
        minx, miny = finite.min(axis=0)
        maxx, maxy = finite.max(axis=0)
        bounds = (
            f"bounds=({minx:.6g},{miny:.6g})..({maxx:.6g},{maxy:.6g})"
        )
    debug.log(
        f"{name}: points={flat.shape[0]} "
        f"finite_all={bool(finite_mask.all())} {bounds}"
    )


def reset_once() -> None:
    _seen.clear()
