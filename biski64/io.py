"""Writers for demo-run artifacts: raw output arrays, bit bitmaps, run metadata."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
from typing import Any

import numpy as np
from PIL import Image


def resolve_output_dir(
    out_root: str | Path,
    canonical_seed: str,
    count: int,
    streams: int,
    *,
    overwrite: bool,
) -> Path:
    """Create `<out_root>/<canonical_seed>/n<count>-s<streams>` for one demo run.

    Raises `FileExistsError` for a non-empty directory unless `overwrite` is set.
    """

    target = Path(out_root) / canonical_seed / f"n{count}-s{streams}"
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def safe_clean_output_dir(target: Path, *, out_root: Path, project_root: Path) -> None:
    """Remove stale run artifacts from `target` before a staged run is moved in.

    `target` must sit under `out_root`, which must sit under `project_root`.
    """

    out_root_r = out_root.resolve()
    project_root_r = project_root.resolve()
    target_r = target.resolve()
    target_r.relative_to(out_root_r)
    out_root_r.relative_to(project_root_r)

    if not target_r.exists():
        target_r.mkdir(parents=True, exist_ok=True)
        return

    for child in target_r.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def move_tree_contents(src_dir: Path, dst_dir: Path) -> None:
    """Move staged artifacts (`.npy`, `bits.png`, JSON) into the run directory."""

    for child in src_dir.iterdir():
        shutil.move(str(child), str(dst_dir / child.name))


def write_outputs_npy(path: str | Path, outputs: np.ndarray) -> None:
    """Save raw generator outputs as a uint64 `.npy` array."""

    np.save(Path(path), np.asarray(outputs, dtype=np.uint64), allow_pickle=False)


def write_png_u8(path: str | Path, raster_u8: np.ndarray) -> None:
    image = Image.fromarray(raster_u8.astype(np.uint8))
    image.save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    """Write run metadata with sorted keys; u64 seeds and outputs stay exact ints."""

    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
