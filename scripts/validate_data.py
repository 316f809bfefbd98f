#!/usr/bin/env python
from __future__ import annotations
import logging
import sys
from pathlib import Path

from adapters.csv_adapter import load_recipes, get_last_load_stats
from schema.validate import recipe_warnings
from timeline import schedule
from utils.time_format import decimal_minutes_to_min_sec


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    data_dir = Path(argv[1]) if len(argv) > 1 else None
    try:
        recipes = load_recipes(data_dir)
    except Exception as e:
        stats = get_last_load_stats()
        print("✖ Recipe validation failed.")
        for name, meta in stats.items():
            if name != "error":
                print(f"  - {name}: {meta.get('rows_read', 0)} rows read")
        print(f"\nDetails:\n  - {e}")
        return 1

    print(f"✔ Loaded {len(recipes)} recipes.")
    for r in recipes:
        total = schedule(r, 1).total_duration
        print(f"  - {r.recipe_id} {r.name}: {len(r.steps)} steps, {decimal_minutes_to_min_sec(total)} at 1 film")

    warnings = recipe_warnings(recipes)
    if warnings:
        print("\nWarnings:")
        for w in warnings:
            print(f"  - {w}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
