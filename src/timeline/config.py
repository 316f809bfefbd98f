from __future__ import annotations
from typing import Mapping, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "TIMELINE_"


class TimelineSettings(BaseSettings):
    """Tunables shared by the scheduler and the merger.

    Values can be overridden through ``TIMELINE_*`` environment variables,
    e.g. ``TIMELINE_DONE_LABEL=Finished``.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, extra="ignore", frozen=True
    )

    done_label: str = Field(default="Done", min_length=1)
    default_quantity: int = Field(default=1, ge=1)
    merge_name_separator: str = " + "
    side_note_separator: str = "\n"
    composite_id_chars: int = Field(default=4, ge=1)


DEFAULT_SETTINGS = TimelineSettings()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> TimelineSettings:
    """Build settings from ``TIMELINE_*`` environment variables.

    Entries of ``environ`` (same naming, any case) take precedence over the
    process environment; keys without the prefix are ignored.
    """
    if environ is None:
        return TimelineSettings()
    values = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.upper().startswith(ENV_PREFIX)
    }
    return TimelineSettings(**values)


__all__ = ["TimelineSettings", "DEFAULT_SETTINGS", "load_settings", "ENV_PREFIX"]
