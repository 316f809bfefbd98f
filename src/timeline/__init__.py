"""Process-timeline engine.

Pure functions that resolve recipe steps for a batch quantity, lay a recipe
out from t=0 and interleave several recipes into one timeline. Nothing here
performs I/O; loading, export and rendering live in the host packages.
"""

from .config import DEFAULT_SETTINGS, TimelineSettings, load_settings  # noqa: F401
from .errors import InvalidQuantityError, InvalidRuleError, TimelineError  # noqa: F401
from .merge import composite_id, merge_schedules, merge_timelines  # noqa: F401
from .overrides import resolve_override  # noqa: F401
from .resolver import resolve_step  # noqa: F401
from .rules import apply_rule  # noqa: F401
from .scheduler import schedule  # noqa: F401

__all__ = [
    "resolve_override",
    "apply_rule",
    "resolve_step",
    "schedule",
    "merge_timelines",
    "merge_schedules",
    "composite_id",
    "TimelineSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "TimelineError",
    "InvalidRuleError",
    "InvalidQuantityError",
]
