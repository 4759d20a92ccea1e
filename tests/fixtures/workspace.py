"""Filesystem helpers shared by tests."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence


def write_csv(
    path: Path, rows: Sequence[Sequence[str]], *, delimiter: str = ","
) -> Path:
    """Write ``rows`` to ``path`` as delimited text and return the path."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, delimiter=delimiter)
        writer.writerows(rows)
    return path
