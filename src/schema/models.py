from __future__ import annotations
from typing import Optional, Tuple
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _Value(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


def _strip_text(v):
    if v is None:
        return ""
    return str(v).strip()


def _strip_nullable(v):
    if v is None:
        return None
    s = str(v).strip()
    return s or None


# ---- Recipe definitions -----------------------------------------------------


class Rule(_Value):
    """Every ``film_interval`` units past the first interval add ``time_increment`` minutes."""

    film_interval: int = Field(gt=0)
    time_increment: float = 0.0


class Override(_Value):
    film_count_min: int
    film_count_max: int
    duration: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("duration", "time")
    )
    label: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("label", "step")
    )
    details: Optional[str] = None
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None

    @field_validator("label", "details", mode="before")
    @classmethod
    def _strip(cls, v):
        return _strip_nullable(v)

    def contains(self, quantity: int) -> bool:
        return self.film_count_min <= quantity <= self.film_count_max


class Step(_Value):
    step_id: Optional[str] = None
    base_duration: float = Field(
        ge=0, validation_alias=AliasChoices("base_duration", "time", "duration")
    )
    label: str = Field(validation_alias=AliasChoices("label", "step"))
    details: str = ""
    temperature_min: float = 0.0
    temperature_max: Optional[float] = None
    rule: Optional[Rule] = None
    overrides: Tuple[Override, ...] = ()

    @field_validator("label", "details", mode="before")
    @classmethod
    def _strip(cls, v):
        return _strip_text(v)

    @field_validator("step_id", mode="before")
    @classmethod
    def _id_strip(cls, v):
        return _strip_nullable(v)

    @field_validator("overrides", mode="before")
    @classmethod
    def _overrides_none(cls, v):
        if v is None:
            return ()
        return v


class Recipe(_Value):
    recipe_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    side_note: str = ""
    steps: Tuple[Step, ...] = ()

    @field_validator("recipe_id", "name", "side_note", mode="before")
    @classmethod
    def _strip(cls, v):
        return _strip_text(v)


# ---- Engine output ----------------------------------------------------------


class ResolvedStep(_Value):
    duration: float
    label: str
    details: str = ""
    temperature_min: float = 0.0
    temperature_max: Optional[float] = None


class ScheduleEntry(_Value):
    step: ResolvedStep
    start_offset: float
    duration: float
    index: int
    is_terminal: bool = False


class Schedule(_Value):
    recipe_id: str
    recipe_name: str
    quantity: int
    entries: Tuple[ScheduleEntry, ...] = ()
    total_duration: float = 0.0

    @property
    def steps(self) -> Tuple[ScheduleEntry, ...]:
        """Entries without the terminal marker."""
        return tuple(e for e in self.entries if not e.is_terminal)


class MergedEntry(_Value):
    recipe_label: str
    recipe_id: str
    step: ResolvedStep
    start_offset: float
    duration: float
    index: int
    is_terminal: bool = False


class MergedTimeline(_Value):
    composite_id: str = ""
    name: str = ""
    side_note: str = ""
    quantity: int
    entries: Tuple[MergedEntry, ...] = ()
    total_duration: float = 0.0
