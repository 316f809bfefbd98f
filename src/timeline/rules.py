from __future__ import annotations
from typing import Optional

from schema.models import Rule
from .errors import InvalidRuleError


def increment_count(rule: Rule, quantity: int) -> int:
    """Number of completed intervals past the first one (mathematical floor)."""
    if rule.film_interval <= 0:
        raise InvalidRuleError(
            f"film_interval must be a positive integer (got {rule.film_interval!r})"
        )
    return (quantity - 1) // rule.film_interval


def apply_rule(base_duration: float, rule: Optional[Rule], quantity: int) -> float:
    """
    Duration after applying an interval rule.

    Quantities 1..film_interval keep the base duration, the next interval adds
    one time_increment, and so on.
    """
    if rule is None:
        return float(base_duration)
    return float(base_duration) + increment_count(rule, quantity) * float(
        rule.time_increment
    )


__all__ = ["apply_rule", "increment_count"]
