class TimelineError(ValueError):
    """Base class for precondition violations detected by the timeline engine."""


class InvalidRuleError(TimelineError):
    pass


class InvalidQuantityError(TimelineError):
    pass


__all__ = ["TimelineError", "InvalidRuleError", "InvalidQuantityError"]
