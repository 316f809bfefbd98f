from io import BytesIO

import pandas as pd
import pytest
from openpyxl import load_workbook

from export.csv_exporter import schedule_to_dataframe
from export.excel_exporter import sheet_title, timelines_to_excel_bytes
from timeline import schedule


def _read_sheets(bytes_data: bytes) -> dict:
    wb = load_workbook(filename=BytesIO(bytes_data))
    out = {}
    for ws in wb.worksheets:
        rows = list(ws.values)
        out[ws.title] = pd.DataFrame(rows[1:], columns=rows[0])
    return out


def test_one_sheet_per_table(rule_recipe):
    sched_df = schedule_to_dataframe(schedule(rule_recipe, 3))
    b = timelines_to_excel_bytes({"Rule recipe": sched_df, "other": pd.DataFrame({"a": [1]})})
    sheets = _read_sheets(b)
    assert list(sheets) == ["Rule recipe", "other"]
    out = sheets["Rule recipe"]
    assert out["step"].tolist() == ["A", "B", "Done"]
    assert float(out.loc[2, "start"]) == 6.0


def test_sheet_names_sanitised_and_unique():
    taken: set = set()
    assert sheet_title("C-41 / B&W", taken) == "C-41 _ B&W"
    assert sheet_title("c-41 / b&w", taken) == "c-41 _ b&w (2)"
    long = sheet_title("x" * 40, taken)
    assert len(long) == 31


def test_empty_mapping_rejected():
    with pytest.raises(ValueError):
        timelines_to_excel_bytes({})


def test_repeated_names_as_pairs_keep_every_sheet():
    pairs = [
        ("merged", pd.DataFrame({"a": [1]})),
        ("merged", pd.DataFrame({"a": [2]})),
        ("Dev", pd.DataFrame({"a": [3]})),
        ("dev", pd.DataFrame({"a": [4]})),
    ]
    sheets = _read_sheets(timelines_to_excel_bytes(pairs))
    assert list(sheets) == ["merged", "merged (2)", "Dev", "dev (2)"]
    assert [int(df.loc[0, "a"]) for df in sheets.values()] == [1, 2, 3, 4]


def test_empty_pairs_rejected():
    with pytest.raises(ValueError):
        timelines_to_excel_bytes([])
