from __future__ import annotations

from io import BytesIO
import re
from typing import Iterable, Mapping, Tuple, Union

import pandas as pd

# Excel limits sheet names to 31 chars and forbids []:*?/\
_BAD_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def sheet_title(name: str, taken: set[str]) -> str:
    base = _BAD_SHEET_CHARS.sub("_", str(name)).strip() or "Sheet"
    title = base[:31]
    n = 2
    while title.lower() in taken:
        suffix = f" ({n})"
        title = base[: 31 - len(suffix)] + suffix
        n += 1
    taken.add(title.lower())
    return title


def timelines_to_excel_bytes(
    sheets: Union[Mapping[str, pd.DataFrame], Iterable[Tuple[str, pd.DataFrame]]],
    *,
    index: bool = False,
    float_format: str | None = None,
) -> bytes:
    """Write each DataFrame to its own worksheet and return the XLSX payload.

    ``sheets`` is a mapping or a sequence of (name, frame) pairs. Sheet names
    are sanitised and de-duplicated, so repeated names each get their own
    sheet; insertion order is kept.
    """
    items = list(sheets.items()) if isinstance(sheets, Mapping) else list(sheets)
    if not items:
        raise ValueError("No tables provided for Excel export.")
    buf = BytesIO()
    taken: set[str] = set()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in items:
            df.to_excel(
                writer,
                sheet_name=sheet_title(name, taken),
                index=index,
                float_format=float_format,
            )
    return buf.getvalue()


__all__ = ["timelines_to_excel_bytes", "sheet_title"]
