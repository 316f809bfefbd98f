from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from schema.models import MergedEntry, MergedTimeline, Recipe, Schedule
from .config import DEFAULT_SETTINGS, TimelineSettings
from .resolver import check_quantity
from .scheduler import schedule

logger = logging.getLogger(__name__)


def composite_id(recipe_ids: Iterable[str], chars: int = 4) -> str:
    """
    Interleave the leading characters of several ids into one short key.

    Character 0 of every id comes first, then character 1 of every id, and so
    on up to ``chars``; ids shorter than the current position are skipped.
    Example: ['ABCD', 'WXYZ'] -> 'AWBXCYDZ'.
    """
    ids = [str(r) for r in recipe_ids]
    out: List[str] = []
    for pos in range(chars):
        for rid in ids:
            if pos < len(rid):
                out.append(rid[pos])
    return "".join(out)


def tag_schedule(sched: Schedule, recipe_label: str) -> List[MergedEntry]:
    return [
        MergedEntry(
            recipe_label=recipe_label,
            recipe_id=sched.recipe_id,
            step=e.step,
            start_offset=e.start_offset,
            duration=e.duration,
            index=e.index,
            is_terminal=e.is_terminal,
        )
        for e in sched.entries
    ]


def merge_schedules(
    schedules: Sequence[Schedule], labels: Optional[Sequence[str]] = None
) -> List[MergedEntry]:
    """
    Interleave already-computed schedules by start offset.

    Entries sharing a start offset keep their concatenation order: schedule
    input order first, then step order within each schedule.
    """
    if labels is None:
        labels = [s.recipe_name for s in schedules]
    if len(labels) != len(schedules):
        raise ValueError("labels and schedules must have the same length")

    tagged: List[MergedEntry] = []
    for sched, label in zip(schedules, labels):
        tagged.extend(tag_schedule(sched, label))
    # sorted() is stable, which is what keeps ties deterministic
    return sorted(tagged, key=lambda e: e.start_offset)


def merge_timelines(
    recipes: Sequence[Recipe],
    quantity: Optional[int] = None,
    settings: TimelineSettings = DEFAULT_SETTINGS,
) -> MergedTimeline:
    """
    Run every recipe from t=0 with the same ``quantity`` and fuse the results
    into one chronological list, each entry tagged with its recipe's name.
    Non-empty side notes are carried over in recipe order.

    An empty recipe list yields an empty timeline.
    """
    quantity = check_quantity(quantity, settings)
    schedules = [schedule(r, quantity, settings) for r in recipes]
    entries = merge_schedules(schedules, [r.name for r in recipes])
    logger.debug(
        "merged %d recipes into %d entries (quantity=%d)",
        len(recipes),
        len(entries),
        quantity,
    )
    return MergedTimeline(
        composite_id=composite_id(
            (r.recipe_id for r in recipes), settings.composite_id_chars
        ),
        name=settings.merge_name_separator.join(r.name for r in recipes),
        side_note=settings.side_note_separator.join(
            r.side_note for r in recipes if r.side_note
        ),
        quantity=quantity,
        entries=tuple(entries),
        total_duration=max((s.total_duration for s in schedules), default=0.0),
    )


__all__ = ["merge_timelines", "merge_schedules", "tag_schedule", "composite_id"]
