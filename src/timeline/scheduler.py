from __future__ import annotations
import logging
from typing import List, Optional

from schema.models import Recipe, ResolvedStep, Schedule, ScheduleEntry
from .config import DEFAULT_SETTINGS, TimelineSettings
from .resolver import check_quantity, resolve_step

logger = logging.getLogger(__name__)


def terminal_step(
    last: Optional[ResolvedStep], settings: TimelineSettings = DEFAULT_SETTINGS
) -> ResolvedStep:
    """Zero-length 'process complete' marker; keeps the last step's temperature."""
    return ResolvedStep(
        duration=0.0,
        label=settings.done_label,
        details="",
        temperature_min=last.temperature_min if last is not None else 0.0,
        temperature_max=last.temperature_max if last is not None else None,
    )


def schedule(
    recipe: Recipe,
    quantity: Optional[int] = None,
    settings: TimelineSettings = DEFAULT_SETTINGS,
) -> Schedule:
    """
    Resolve every step of ``recipe`` for ``quantity`` units and lay them out
    back to back from t=0 (minutes).

    Returns a Schedule whose entries are the resolved steps in recipe order
    followed by one terminal entry at ``total_duration``.
    """
    quantity = check_quantity(quantity, settings)

    entries: List[ScheduleEntry] = []
    accumulated = 0.0
    last: Optional[ResolvedStep] = None
    for idx, step in enumerate(recipe.steps):
        resolved = resolve_step(step, quantity)
        entries.append(
            ScheduleEntry(
                step=resolved,
                start_offset=accumulated,
                duration=resolved.duration,
                index=idx,
            )
        )
        accumulated += resolved.duration
        last = resolved

    entries.append(
        ScheduleEntry(
            step=terminal_step(last, settings),
            start_offset=accumulated,
            duration=0.0,
            index=len(recipe.steps),
            is_terminal=True,
        )
    )
    logger.debug(
        "scheduled recipe %r: %d steps, quantity=%d, total=%.2f min",
        recipe.recipe_id,
        len(recipe.steps),
        quantity,
        accumulated,
    )
    return Schedule(
        recipe_id=recipe.recipe_id,
        recipe_name=recipe.name,
        quantity=quantity,
        entries=tuple(entries),
        total_duration=accumulated,
    )


__all__ = ["schedule", "terminal_step"]
