from __future__ import annotations
from typing import Mapping, Sequence
import re

import pandas as pd

from schema.models import MergedTimeline, Schedule
from utils.time_format import decimal_minutes_to_min_sec, format_temperature

SCHEDULE_COLUMNS = [
    "index",
    "step",
    "details",
    "start",
    "duration",
    "start_mmss",
    "duration_mmss",
    "temperature_min",
    "temperature_max",
    "temperature",
    "is_terminal",
]
MERGED_COLUMNS = ["recipe", "recipe_id"] + SCHEDULE_COLUMNS


def _row(step, start: float, duration: float, index: int, is_terminal: bool) -> dict:
    return {
        "index": index,
        "step": step.label,
        "details": step.details,
        "start": start,
        "duration": duration,
        "start_mmss": decimal_minutes_to_min_sec(start),
        "duration_mmss": decimal_minutes_to_min_sec(duration),
        "temperature_min": step.temperature_min,
        "temperature_max": step.temperature_max,
        "temperature": format_temperature(step.temperature_min, step.temperature_max),
        "is_terminal": is_terminal,
    }


def schedule_to_dataframe(sched: Schedule) -> pd.DataFrame:
    """One row per schedule entry (terminal marker included), minutes as floats."""
    rows = [
        _row(e.step, e.start_offset, e.duration, e.index, e.is_terminal)
        for e in sched.entries
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def merged_to_dataframe(merged: MergedTimeline) -> pd.DataFrame:
    """One row per merged entry in timeline order, tagged with its recipe."""
    rows = []
    for e in merged.entries:
        row = {"recipe": e.recipe_label, "recipe_id": e.recipe_id}
        row.update(_row(e.step, e.start_offset, e.duration, e.index, e.is_terminal))
        rows.append(row)
    return pd.DataFrame(rows, columns=MERGED_COLUMNS)


def to_csv_bytes(
    df: pd.DataFrame,
    *,
    columns: Sequence[str] | None = None,
    rename: Mapping[str, str] | None = None,
    index: bool = False,
    encoding: str = "utf-8",
    float_format: str | None = None,
) -> bytes:
    """Serialize a DataFrame to CSV bytes.

    Column selection is applied before rename, so ``rename`` maps the original
    column keys. Unknown columns in ``columns`` are ignored.
    """
    out = df.copy()
    if columns:
        out = out.loc[:, [c for c in columns if c in out.columns]]
    if rename:
        out = out.rename(columns=dict(rename))
    return out.to_csv(index=index, float_format=float_format).encode(encoding)


def safe_filename(name: str, ext: str = "csv") -> str:
    """Create a filesystem-friendly filename with the given extension."""
    slug = re.sub(r"[^A-Za-z0-9\-_. ]+", "_", name).strip().strip("._ ")
    slug = re.sub(r"[\s]+", "_", slug)
    if not slug:
        slug = "timeline"
    return f"{slug}.{ext.lstrip('.')}"


__all__ = [
    "schedule_to_dataframe",
    "merged_to_dataframe",
    "to_csv_bytes",
    "safe_filename",
    "SCHEDULE_COLUMNS",
    "MERGED_COLUMNS",
]
