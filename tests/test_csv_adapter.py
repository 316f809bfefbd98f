import logging

import pandas as pd
import pytest

from adapters.csv_adapter import (
    get_last_load_stats,
    load_recipes,
    read_csv_tables,
    recipes_from_tables,
)
from timeline import merge_timelines, schedule


def make_tables():
    recipes = pd.DataFrame(
        [
            {"recipe_id": "C41", "name": "C-41", "side_note": "Tetenal kit"},
            {"recipe_id": "BW", "name": "B&W", "side_note": None},
        ]
    )
    steps = pd.DataFrame(
        [
            # listed out of order on purpose
            {"step_id": "c2", "recipe_id": "C41", "index": 1, "duration": 6.5, "label": "Blix",
             "details": None, "temperature_min": 30, "temperature_max": 39},
            {"step_id": "c1", "recipe_id": "C41", "index": 0, "duration": 3.25, "label": "Developer",
             "details": "Agitate", "temperature_min": 38, "temperature_max": None},
            {"step_id": "b1", "recipe_id": "BW", "index": 0, "duration": 9, "label": "Developer",
             "details": "", "temperature_min": 20, "temperature_max": None},
        ]
    )
    rules = pd.DataFrame([{"step_id": "b1", "film_interval": 2, "time_increment": 0.25}])
    overrides = pd.DataFrame(
        [
            {"step_id": "c1", "film_count_min": 9, "film_count_max": 12, "duration": 3.5,
             "label": None, "details": "Extend", "temperature_min": None, "temperature_max": None},
        ]
    )
    return {"recipes": recipes, "steps": steps, "rules": rules, "overrides": overrides}


def test_recipes_from_tables_builds_ordered_steps():
    recipes = recipes_from_tables(make_tables())
    assert [r.recipe_id for r in recipes] == ["C41", "BW"]
    c41 = recipes[0]
    assert c41.side_note == "Tetenal kit"
    assert [s.label for s in c41.steps] == ["Developer", "Blix"]
    dev = c41.steps[0]
    assert dev.step_id == "c1"
    assert dev.temperature_max is None
    assert len(dev.overrides) == 1
    assert dev.overrides[0].duration == 3.5
    assert dev.overrides[0].label is None
    assert c41.steps[1].details == ""
    assert recipes[1].steps[0].rule.film_interval == 2
    assert recipes[1].side_note == ""


def test_loaded_recipes_drive_the_engine():
    c41, bw = recipes_from_tables(make_tables())
    assert schedule(c41, 10).total_duration == pytest.approx(3.5 + 6.5)
    assert schedule(bw, 3).total_duration == pytest.approx(9.25)
    merged = merge_timelines([c41, bw], 1)
    assert merged.name == "C-41 + B&W"
    assert len(merged.entries) == 5


def test_note_column_names_are_accepted():
    tables = {
        "recipes": pd.DataFrame([{"recipe_id": "N", "name": "Note"}]),
        "steps": pd.DataFrame(
            [
                {"note_id": "N", "Time": 2, "Step": "Dev"},
                {"note_id": "N", "Time": 1, "Step": "Fix"},
            ]
        ),
    }
    (recipe,) = recipes_from_tables(tables)
    # no index column: file order is the step order
    assert [(s.label, s.base_duration) for s in recipe.steps] == [("Dev", 2.0), ("Fix", 1.0)]
    assert recipe.steps[0].step_id == "N:0"


def test_duplicate_index_keeps_first_and_extra_rules_dropped(caplog):
    tables = make_tables()
    tables["steps"] = pd.concat(
        [
            tables["steps"],
            pd.DataFrame([{"step_id": "dup", "recipe_id": "BW", "index": 0, "duration": 1, "label": "Other"}]),
        ],
        ignore_index=True,
    )
    tables["rules"] = pd.concat(
        [tables["rules"], pd.DataFrame([{"step_id": "b1", "film_interval": 5, "time_increment": 9}])],
        ignore_index=True,
    )
    with caplog.at_level(logging.WARNING):
        recipes = recipes_from_tables(tables)
    bw = recipes[1]
    assert [s.label for s in bw.steps] == ["Developer"]
    assert bw.steps[0].rule.film_interval == 2
    assert "duplicate" in caplog.text
    assert "keeping the first" in caplog.text


def test_invalid_extra_rule_is_dropped_not_validated(caplog):
    tables = make_tables()
    tables["rules"] = pd.DataFrame(
        [
            {"step_id": "b1", "film_interval": 2, "time_increment": 1.0},
            {"step_id": "b1", "film_interval": 0, "time_increment": 1.0},
        ]
    )
    with caplog.at_level(logging.WARNING):
        recipes = recipes_from_tables(tables)
    rule = recipes[1].steps[0].rule
    assert rule.film_interval == 2
    assert rule.time_increment == 1.0
    assert "b1 has 2 rules; keeping the first" in caplog.text


def test_orphan_steps_are_skipped(caplog):
    tables = make_tables()
    tables["steps"] = pd.concat(
        [
            tables["steps"],
            pd.DataFrame([{"step_id": "x", "recipe_id": "GONE", "index": 0, "duration": 1, "label": "X"}]),
        ],
        ignore_index=True,
    )
    with caplog.at_level(logging.WARNING):
        recipes = recipes_from_tables(tables)
    assert [r.recipe_id for r in recipes] == ["C41", "BW"]
    assert "GONE" in caplog.text


def test_missing_required_column_raises():
    tables = make_tables()
    tables["steps"] = tables["steps"].drop(columns=["label"])
    with pytest.raises(ValueError, match="steps missing required columns"):
        recipes_from_tables(tables)


def test_invalid_rows_raise_aggregated_error():
    tables = make_tables()
    tables["rules"] = pd.DataFrame([{"step_id": "b1", "film_interval": 0, "time_increment": 1}])
    with pytest.raises(ValueError, match="Validation failed for rules"):
        recipes_from_tables(tables)


def test_no_recipes_table_yields_empty_list():
    assert recipes_from_tables({}) == []


def test_csv_round_trip_and_stats(tmp_path):
    for name, df in make_tables().items():
        df.to_csv(tmp_path / f"{name}.csv", index=False)
    recipes = load_recipes(tmp_path)
    assert [r.recipe_id for r in recipes] == ["C41", "BW"]
    assert recipes[0].steps[0].overrides[0].film_count_max == 12
    stats = get_last_load_stats()
    assert stats["steps"]["rows_read"] == 3
    assert stats["recipes"]["recipes_loaded"] == 2


def test_missing_files_yield_empty_tables(tmp_path):
    tables = read_csv_tables(tmp_path)
    assert set(tables) == {"recipes", "steps", "rules", "overrides"}
    assert all(df.empty for df in tables.values())
    assert load_recipes(tmp_path) == []


def test_load_failure_recorded_in_stats(tmp_path):
    tables = make_tables()
    tables["steps"] = tables["steps"].drop(columns=["duration"])
    for name, df in tables.items():
        df.to_csv(tmp_path / f"{name}.csv", index=False)
    with pytest.raises(ValueError):
        load_recipes(tmp_path)
    assert "missing required columns" in get_last_load_stats()["error"]["message"]
