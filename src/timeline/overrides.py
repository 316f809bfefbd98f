from __future__ import annotations
import logging
from typing import Optional

from schema.models import Override, Step

logger = logging.getLogger(__name__)


def resolve_override(step: Step, quantity: int) -> Optional[Override]:
    """
    Pick the override that applies to ``step`` for a batch of ``quantity`` units.

    Rules:
    - An override whose inclusive [film_count_min, film_count_max] range contains
      the quantity wins. When several ranges contain it, the first one in input
      order is selected.
    - Otherwise the last override that has already ended (largest film_count_max
      <= quantity) keeps applying. Ties on film_count_max also go to the first
      in input order.
    - Otherwise (quantity below every range) None: base values apply.
    """
    overrides = step.overrides
    if not overrides:
        return None

    for ov in overrides:
        if ov.contains(quantity):
            return ov

    fallback: Optional[Override] = None
    for ov in overrides:
        if ov.film_count_max > quantity:
            continue
        # strict '>' keeps the earliest override on equal maxima
        if fallback is None or ov.film_count_max > fallback.film_count_max:
            fallback = ov

    if fallback is not None:
        logger.debug(
            "step %r: no range contains %d, falling back to override %d-%d",
            step.label,
            quantity,
            fallback.film_count_min,
            fallback.film_count_max,
        )
    return fallback


__all__ = ["resolve_override"]
