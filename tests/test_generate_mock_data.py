import pytest

from adapters.csv_adapter import load_recipes
from generate_mock_data import generate_mock_data
from schema.validate import recipe_warnings
from timeline import merge_timelines, schedule


def test_generated_tables_load_and_schedule(tmp_path):
    generate_mock_data(out_dir=tmp_path, seed=1)
    recipes = load_recipes(tmp_path)
    assert [r.name for r in recipes] == ["C-41 kit", "B&W kit", "E-6 kit"]
    assert recipe_warnings(recipes) == []

    c41, bw, e6 = recipes
    assert schedule(c41, 1).total_duration == pytest.approx(14.75)
    # films 9-12 use the first developer override
    assert schedule(c41, 10).entries[1].duration == pytest.approx(3.5)
    # B&W developer: +0.25 min every 2 films after the first two
    assert schedule(bw, 5).entries[0].duration == pytest.approx(9.5)

    merged = merge_timelines(recipes, 1)
    assert len(merged.entries) == sum(len(r.steps) + 1 for r in recipes)


def test_process_selection_and_jitter(tmp_path):
    tables = generate_mock_data(out_dir=tmp_path, processes=["B&W"], seed=3, jitter=0.2)
    assert len(tables["recipes"]) == 1
    assert tables["overrides"].empty
    durations = tables["steps"]["duration"].tolist()
    assert all(d >= 0.25 and (d * 4).is_integer() for d in durations)
