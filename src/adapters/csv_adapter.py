from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from schema.models import Override, Recipe, Rule, Step
from schema.validate import validate_records

logger = logging.getLogger(__name__)

# In-memory stats for last load
# Note: values include ints and optional error strings under key 'error'.
_LAST_LOAD_STATS: Dict[str, Dict[str, Any]] = {}

DATA_DIR = Path(
    os.environ.get("TIMELINE_DATA_DIR", Path(__file__).resolve().parents[2] / "data")
)

TABLES_ORDER = ["recipes", "steps", "rules", "overrides"]

# Legacy note-table column names -> recipe table names
_COLUMN_ALIASES = {
    "time": "duration",
    "step": "label",
    "note_id": "recipe_id",
    "note_entry_id": "step_id",
}


def _blank_to_none(v):
    if v is None:
        return None
    if isinstance(v, str):
        s = v.strip()
        return None if s == "" or s.lower() in ("nan", "none") else s
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    # numpy scalars -> builtin int/float for pydantic
    if hasattr(v, "item") and not isinstance(v, (str, bytes)):
        return v.item()
    return v


def _prepare(df: pd.DataFrame, table: str, required: List[str]) -> pd.DataFrame:
    out = df.copy()
    out.columns = [str(c).strip().lower() for c in out.columns]
    out = out.rename(
        columns={k: v for k, v in _COLUMN_ALIASES.items() if v not in out.columns}
    )
    missing = [c for c in required if c not in out.columns]
    if missing:
        raise ValueError(f"{table} missing required columns: {missing}")
    for col in ("recipe_id", "step_id"):
        if col in out.columns:
            out[col] = out[col].map(_blank_to_none).map(
                lambda v: None if v is None else str(v)
            )
    return out


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    return [
        {k: _blank_to_none(v) for k, v in rec.items()}
        for rec in df.to_dict(orient="records")
    ]


def _normalize_steps(df: pd.DataFrame) -> pd.DataFrame:
    out = _prepare(df, "steps", ["recipe_id", "duration", "label"])
    if "index" not in out.columns:
        # file order is the step order
        out["index"] = range(len(out))
    out["index"] = pd.to_numeric(out["index"], errors="coerce")
    bad_index = out["index"].isna()
    if bad_index.any():
        raise ValueError(f"steps has {int(bad_index.sum())} rows with a non-numeric index")
    if "step_id" not in out.columns:
        out["step_id"] = out["recipe_id"].astype(str) + ":" + out["index"].astype(int).astype(str)
    dups = out.duplicated(subset=["recipe_id", "index"], keep="first")
    if dups.any():
        logger.warning(
            "steps: dropping %d duplicate (recipe_id, index) rows", int(dups.sum())
        )
        out = out.loc[~dups]
    return out.sort_values(["recipe_id", "index"], kind="stable").reset_index(drop=True)


def _group_by_step(records: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for rec in records:
        sid = rec.get("step_id")
        if sid is None:
            logger.warning("skipping row without step_id: %r", rec)
            continue
        grouped.setdefault(str(sid), []).append(rec)
    return grouped


def recipes_from_tables(tables: Dict[str, pd.DataFrame]) -> List[Recipe]:
    """
    Build Recipe snapshots from the four recipe tables.

    Rules:
    - recipes: [recipe_id, name, side_note?]; recipe order follows the table.
    - steps: [recipe_id, step_id?, index?, duration|time, label|step, details?,
      temperature_min?, temperature_max?]; ordered by index, duplicates on
      (recipe_id, index) keep the first row.
    - rules: [step_id, film_interval, time_increment]; at most one per step, the
      first wins.
    - overrides: [step_id, film_count_min, film_count_max, duration?, label?,
      details?, temperature_min?, temperature_max?].
    - Steps pointing at an unknown recipe are skipped with a warning.
    Raises ValueError on missing columns or invalid rows.
    """
    recipes_df = tables.get("recipes")
    if recipes_df is None or recipes_df.empty:
        return []
    recipes_df = _prepare(recipes_df, "recipes", ["recipe_id", "name"])

    steps_df = tables.get("steps")
    steps_df = (
        _normalize_steps(steps_df)
        if steps_df is not None and not steps_df.empty
        else pd.DataFrame(columns=["recipe_id", "step_id", "index"])
    )

    rules: Dict[str, List[Dict[str, Any]]] = {}
    rules_df = tables.get("rules")
    if rules_df is not None and not rules_df.empty:
        rules = _group_by_step(
            _records(_prepare(rules_df, "rules", ["step_id", "film_interval"]))
        )

    overrides: Dict[str, List[Dict[str, Any]]] = {}
    overrides_df = tables.get("overrides")
    if overrides_df is not None and not overrides_df.empty:
        overrides = _group_by_step(
            _records(
                _prepare(
                    overrides_df,
                    "overrides",
                    ["step_id", "film_count_min", "film_count_max"],
                )
            )
        )

    steps_by_recipe: Dict[str, List[Dict[str, Any]]] = {}
    for rec in _records(steps_df):
        sid = str(rec["step_id"])
        rule_rows = rules.get(sid, [])
        if len(rule_rows) > 1:
            logger.warning(
                "step %s has %d rules; keeping the first", sid, len(rule_rows)
            )
        # extras are dropped before validation
        step_rules = validate_records(rule_rows[:1], "rules")
        rec = dict(rec)
        rec.pop("index", None)
        rec["rule"] = step_rules[0] if step_rules else None
        rec["overrides"] = tuple(validate_records(overrides.get(sid, []), "overrides"))
        rec["details"] = rec.get("details") or ""
        if rec.get("temperature_min") is None:
            rec["temperature_min"] = 0.0
        steps_by_recipe.setdefault(str(rec["recipe_id"]), []).append(rec)

    known = set(recipes_df["recipe_id"].dropna().astype(str))
    orphans = set(steps_by_recipe) - known
    for rid in sorted(orphans):
        logger.warning(
            "skipping %d steps of unknown recipe %r", len(steps_by_recipe[rid]), rid
        )

    recipes: List[Recipe] = []
    for rec in _records(recipes_df):
        rid = str(rec["recipe_id"])
        steps: List[Step] = validate_records(steps_by_recipe.get(rid, []), "steps")
        recipes.extend(
            validate_records(
                [
                    {
                        "recipe_id": rid,
                        "name": rec.get("name"),
                        "side_note": rec.get("side_note") or "",
                        "steps": tuple(steps),
                    }
                ],
                "recipes",
            )
        )
    logger.info("loaded %d recipes", len(recipes))
    return recipes


def read_csv_tables(data_dir: Optional[Path] = None) -> Dict[str, pd.DataFrame]:
    """Read recipes/steps/rules/overrides CSV files; missing files yield empty tables."""
    base = Path(data_dir) if data_dir is not None else DATA_DIR
    tables = {}
    _LAST_LOAD_STATS.clear()
    for name in TABLES_ORDER:
        path = base / f"{name}.csv"
        if path.exists():
            df = pd.read_csv(path, dtype={"recipe_id": str, "step_id": str})
            _LAST_LOAD_STATS[name] = {"rows_read": len(df)}
            tables[name] = df
        else:
            _LAST_LOAD_STATS[name] = {"rows_read": 0}
            tables[name] = pd.DataFrame()
    return tables


def load_recipes(data_dir: Optional[Path] = None) -> List[Recipe]:
    """read_csv_tables() + recipes_from_tables(), recording failures in the load stats."""
    tables = read_csv_tables(data_dir)
    try:
        recipes = recipes_from_tables(tables)
    except Exception as e:
        _LAST_LOAD_STATS["error"] = {"message": str(e)}
        raise
    _LAST_LOAD_STATS["recipes"]["recipes_loaded"] = len(recipes)
    return recipes


def get_last_load_stats() -> Dict[str, Dict[str, Any]]:
    """Return row counts for the most recent read_csv_tables() call.
    On failure in load_recipes(), an 'error' entry carries the message.
    """
    return dict(_LAST_LOAD_STATS)


__all__ = [
    "recipes_from_tables",
    "read_csv_tables",
    "load_recipes",
    "get_last_load_stats",
    "DATA_DIR",
]
