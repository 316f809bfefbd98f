"""
Sample recipe data generator.

Outputs CSVs under data/ in the layout read by adapters.csv_adapter:
- recipes: [recipe_id, name, side_note]
- steps: [step_id, recipe_id, index, duration, label, details, temperature_min, temperature_max]
  duration in decimal minutes
- rules: [step_id, film_interval, time_increment]
- overrides: [step_id, film_count_min, film_count_max, duration, label, details,
  temperature_min, temperature_max]
"""

from pathlib import Path
import argparse
import random
import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
DATA = ROOT / "data"

# (label, minutes, details, temp_min, temp_max)
PROCESSES = {
    "C-41": [
        ("Pre-wash", 1.0, "Warm water", 38.0, None),
        ("Developer", 3.25, "Agitate 10s every 30s", 38.0, None),
        ("Blix", 6.5, "Agitate 10s every 30s", 30.0, 39.0),
        ("Wash", 3.0, "Running water", 30.0, 40.0),
        ("Stabilizer", 1.0, "No agitation", 20.0, 25.0),
    ],
    "B&W": [
        ("Developer", 9.0, "Agitate 10s every minute", 20.0, None),
        ("Stop bath", 1.0, "", 18.0, 22.0),
        ("Fixer", 5.0, "Agitate 10s every minute", 18.0, 22.0),
        ("Wash", 10.0, "Ilford method", 18.0, 22.0),
        ("Wetting agent", 0.5, "", 18.0, 22.0),
    ],
    "E-6": [
        ("First developer", 6.5, "Critical temperature", 38.0, None),
        ("Wash", 2.5, "", 33.0, 39.0),
        ("Color developer", 6.0, "", 38.0, None),
        ("Wash", 2.5, "", 33.0, 39.0),
        ("Blix", 8.0, "", 33.0, 39.0),
        ("Wash", 4.0, "", 33.0, 39.0),
        ("Stabilizer", 1.0, "", 20.0, 25.0),
    ],
}


def _quarter(minutes: float) -> float:
    return round(minutes * 4) / 4


def generate_mock_data(
    out_dir: Path = DATA,
    processes: list[str] | None = None,
    seed: int | None = 42,
    jitter: float = 0.0,
    overrides_per_developer: int = 2,
) -> dict[str, pd.DataFrame]:
    if seed is not None:
        random.seed(seed)
    names = processes or list(PROCESSES)

    recipe_rows, step_rows, rule_rows, override_rows = [], [], [], []
    for n, name in enumerate(names, start=1):
        rid = f"{name.replace('&', '').replace('-', '')[:3].upper()}{n:03d}"
        recipe_rows.append(
            {"recipe_id": rid, "name": f"{name} kit", "side_note": f"Sample {name} process"}
        )
        for idx, (label, minutes, details, tmin, tmax) in enumerate(PROCESSES[name]):
            sid = f"{rid}-{idx}"
            if jitter:
                minutes = max(0.25, _quarter(minutes * random.uniform(1 - jitter, 1 + jitter)))
            step_rows.append(
                {
                    "step_id": sid,
                    "recipe_id": rid,
                    "index": idx,
                    "duration": minutes,
                    "label": label,
                    "details": details,
                    "temperature_min": tmin,
                    "temperature_max": tmax,
                }
            )
            if "developer" not in label.lower():
                continue
            if name == "B&W":
                # exhaustion handled by a rule
                rule_rows.append(
                    {"step_id": sid, "film_interval": 2, "time_increment": 0.25}
                )
                continue
            # reused kits: later films get longer development
            lo = 9
            for k in range(overrides_per_developer):
                override_rows.append(
                    {
                        "step_id": sid,
                        "film_count_min": lo,
                        "film_count_max": lo + 3,
                        "duration": _quarter(minutes * (1.1 + 0.1 * k)),
                        "label": None,
                        "details": f"Films {lo}-{lo + 3}: extend development",
                        "temperature_min": None,
                        "temperature_max": None,
                    }
                )
                lo += 4

    tables = {
        "recipes": pd.DataFrame(recipe_rows),
        "steps": pd.DataFrame(step_rows),
        "rules": pd.DataFrame(rule_rows, columns=["step_id", "film_interval", "time_increment"]),
        "overrides": pd.DataFrame(
            override_rows,
            columns=[
                "step_id",
                "film_count_min",
                "film_count_max",
                "duration",
                "label",
                "details",
                "temperature_min",
                "temperature_max",
            ],
        ),
    }
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, df in tables.items():
        df.to_csv(out_dir / f"{name}.csv", index=False)
    print(f"Sample recipe tables written to {out_dir}.")
    return tables


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate sample recipe tables")
    parser.add_argument("--out", type=str, default=str(DATA), help="Output directory")
    parser.add_argument(
        "--process",
        action="append",
        choices=sorted(PROCESSES),
        help="Process to include (repeatable); default all",
    )
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument(
        "--jitter", type=float, default=0.0, help="Random +/- fraction applied to step times"
    )
    parser.add_argument("--overrides-per-developer", type=int, default=2)
    args = parser.parse_args()

    generate_mock_data(
        out_dir=Path(args.out),
        processes=args.process,
        seed=args.seed,
        jitter=args.jitter,
        overrides_per_developer=args.overrides_per_developer,
    )
