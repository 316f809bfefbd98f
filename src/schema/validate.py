from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type
from pydantic import BaseModel, ValidationError

from schema.models import Override, Recipe, Rule, Step

# Map logical record name -> pydantic model
MODEL_REGISTRY: Dict[str, Type[BaseModel]] = {
    "recipes": Recipe,
    "steps": Step,
    "rules": Rule,
    "overrides": Override,
}

MAX_REPORTED_ERRORS = 100


def _format_errors(label: str, errors: List[str]) -> str:
    # Limit extremely noisy output
    head = "\n".join(errors[:MAX_REPORTED_ERRORS])
    more = (
        ""
        if len(errors) <= MAX_REPORTED_ERRORS
        else f"\n... and {len(errors) - MAX_REPORTED_ERRORS} more"
    )
    return f"Validation failed for {label}:\n{head}{more}"


def validate_records(records: Iterable[Mapping[str, Any]], kind: str) -> List[Any]:
    """
    Row-level validation using Pydantic. Returns the parsed model objects.
    Raises ValueError with aggregated, friendly messages if any row is invalid.
    """
    if kind not in MODEL_REGISTRY:
        raise ValueError(f"Unknown record kind '{kind}'")
    model = MODEL_REGISTRY[kind]

    parsed: List[Any] = []
    errors: List[str] = []
    for i, rec in enumerate(records, start=1):
        try:
            parsed.append(model.model_validate(dict(rec)))
        except ValidationError as ve:
            for err in ve.errors():
                loc = ".".join(str(x) for x in err.get("loc", []) if x is not None)
                msg = err.get("msg", "invalid")
                bad = rec.get(loc, None)
                errors.append(f"{kind}: row {i} field '{loc}': {msg} (value={bad!r})")

    if errors:
        raise ValueError(_format_errors(kind, errors))
    return parsed


def recipe_from_dict(data: Mapping[str, Any]) -> Recipe:
    """Parse a nested recipe document (e.g. decoded JSON) into a Recipe."""
    try:
        return Recipe.model_validate(dict(data))
    except ValidationError as ve:
        name = data.get("recipe_id") or data.get("name") or "recipe"
        errors = []
        for err in ve.errors():
            loc = ".".join(str(x) for x in err.get("loc", []) if x is not None)
            errors.append(f"field '{loc}': {err.get('msg', 'invalid')}")
        raise ValueError(_format_errors(str(name), errors)) from ve


def _range_overlaps(overrides: Tuple[Override, ...]) -> List[Tuple[int, int]]:
    """Pairs of override positions whose inclusive ranges intersect."""
    ordered = sorted(
        enumerate(overrides), key=lambda x: (x[1].film_count_min, x[0])
    )
    pairs: List[Tuple[int, int]] = []
    for a in range(len(ordered)):
        ia, oa = ordered[a]
        for b in range(a + 1, len(ordered)):
            ib, ob = ordered[b]
            if ob.film_count_min > oa.film_count_max:
                break
            if ob.film_count_min > ob.film_count_max:
                continue  # inverted ranges contain nothing
            pairs.append(tuple(sorted((ia, ib))))
    pairs.sort()
    return pairs


def recipe_warnings(recipes: Iterable[Recipe]) -> List[str]:
    """
    Data-entry sanity checks that the engine tolerates but a user should fix.

    Reports:
    - INVERTED_RANGE: an override with film_count_min > film_count_max.
    - OVERLAP: two overrides of the same step whose ranges intersect (the
      first in input order wins at resolution time).
    - TEMP_RANGE: temperature_max below temperature_min on a step or override.
    - RULE_SHADOWED: a step carrying both a rule and overrides; the rule is
      ignored whenever an override is selected.
    - DUP_RECIPE: two recipes sharing a recipe_id.
    Deterministic output: messages are sorted.
    """
    errs: List[str] = []
    seen: Dict[str, int] = {}
    for recipe in recipes:
        rid = recipe.recipe_id
        seen[rid] = seen.get(rid, 0) + 1
        for idx, step in enumerate(recipe.steps):
            where = f"recipe={rid} step={idx}({step.label})"
            if (
                step.temperature_max is not None
                and step.temperature_max < step.temperature_min
            ):
                errs.append(
                    f"TEMP_RANGE: {where} temperature_max={step.temperature_max} < temperature_min={step.temperature_min}"
                )
            if step.rule is not None and step.overrides:
                errs.append(f"RULE_SHADOWED: {where} has a rule and overrides")
            for j, ov in enumerate(step.overrides):
                if ov.film_count_min > ov.film_count_max:
                    errs.append(
                        f"INVERTED_RANGE: {where} override={j} range={ov.film_count_min}-{ov.film_count_max}"
                    )
                tmin = ov.temperature_min
                if tmin is None:
                    tmin = step.temperature_min
                if ov.temperature_max is not None and ov.temperature_max < tmin:
                    errs.append(
                        f"TEMP_RANGE: {where} override={j} temperature_max={ov.temperature_max} < temperature_min={tmin}"
                    )
            for a, b in _range_overlaps(step.overrides):
                oa, ob = step.overrides[a], step.overrides[b]
                errs.append(
                    f"OVERLAP: {where} overrides {a}({oa.film_count_min}-{oa.film_count_max}) and {b}({ob.film_count_min}-{ob.film_count_max})"
                )
    for rid, count in seen.items():
        if count > 1:
            errs.append(f"DUP_RECIPE: recipe_id={rid!r} appears {count} times")
    errs.sort()
    return errs


__all__ = ["validate_records", "recipe_from_dict", "recipe_warnings", "MODEL_REGISTRY"]
