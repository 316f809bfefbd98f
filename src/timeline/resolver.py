from __future__ import annotations
from numbers import Integral
from typing import Optional

from schema.models import ResolvedStep, Step
from .config import DEFAULT_SETTINGS, TimelineSettings
from .errors import InvalidQuantityError
from .overrides import resolve_override
from .rules import apply_rule


def check_quantity(
    quantity: Optional[int], settings: TimelineSettings = DEFAULT_SETTINGS
) -> int:
    """Return a usable batch size: None -> default, otherwise an integer >= 1."""
    if quantity is None:
        return settings.default_quantity
    if isinstance(quantity, bool) or not isinstance(quantity, Integral):
        raise InvalidQuantityError(
            f"quantity must be an integer (got {type(quantity).__name__})"
        )
    if quantity < 1:
        raise InvalidQuantityError(f"quantity must be >= 1 (got {quantity})")
    return int(quantity)


def _pick(value, base):
    return base if value is None else value


def resolve_step(step: Step, quantity: int) -> ResolvedStep:
    """Concrete values of ``step`` for a batch of ``quantity`` units.

    A selected override replaces whichever fields it sets and disables the
    step's rule, even when it leaves the duration unset.
    """
    quantity = check_quantity(quantity)
    ov = resolve_override(step, quantity)
    if ov is not None:
        return ResolvedStep(
            duration=float(_pick(ov.duration, step.base_duration)),
            label=_pick(ov.label, step.label),
            details=_pick(ov.details, step.details),
            temperature_min=_pick(ov.temperature_min, step.temperature_min),
            temperature_max=_pick(ov.temperature_max, step.temperature_max),
        )
    return ResolvedStep(
        duration=apply_rule(step.base_duration, step.rule, quantity),
        label=step.label,
        details=step.details,
        temperature_min=step.temperature_min,
        temperature_max=step.temperature_max,
    )


__all__ = ["resolve_step", "check_quantity"]
