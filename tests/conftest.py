from pathlib import Path
import sys
import pytest

ROOT = Path(__file__).resolve().parents[1]
for d in (ROOT / "src", ROOT / "scripts"):
    if d.exists() and str(d) not in sys.path:
        sys.path.insert(0, str(d))

from schema.models import Override, Recipe, Rule, Step  # noqa: E402


@pytest.fixture
def rule_recipe() -> Recipe:
    """A (2 min, plain) then B (3 min, +1 min every 2 films)."""
    return Recipe(
        recipe_id="R1",
        name="Rule recipe",
        steps=[
            Step(base_duration=2, label="A", temperature_min=20),
            Step(
                base_duration=3,
                label="B",
                temperature_min=20,
                rule=Rule(film_interval=2, time_increment=1),
            ),
        ],
    )


@pytest.fixture
def sparse_override_step() -> Step:
    return Step(
        base_duration=4,
        label="Developer",
        temperature_min=38,
        overrides=[
            Override(film_count_min=1, film_count_max=3, duration=5),
            Override(film_count_min=7, film_count_max=9, duration=8),
        ],
    )
