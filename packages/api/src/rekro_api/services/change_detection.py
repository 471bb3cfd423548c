# This project was developed with assistance from AI tools.
"""Unsaved-change detection for the rental form and profile forms.

Two comparators:

- ``terms_have_changes`` compares the rental form field-by-field against the
  stored application, normalizing blank text to None and parsing rent text
  before comparing.
- ``has_changes`` / ``deep_equal`` compare whole form states structurally by
  canonical serialization (key-sorted JSON).

Both report False when no baseline has been captured yet.
"""

import copy
import enum
import json
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel

from ..schemas.rental_form import RentalFormState
from .inclusions import parse_inclusions

_UNSET = object()


# ---------------------------------------------------------------------------
# Deep comparator
# ---------------------------------------------------------------------------

def _normalize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _normalize(value.model_dump())
    if isinstance(value, enum.Enum):
        return _normalize(value.value)
    if isinstance(value, Mapping):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        # Sequences compare as objects keyed by index
        return {str(i): _normalize(v) for i, v in enumerate(value)}
    if isinstance(value, bool):
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def canonical(value: Any) -> str:
    """Key-sorted JSON text; equal structures produce equal strings."""
    return json.dumps(_normalize(value), sort_keys=True, separators=(",", ":"), default=str)


def deep_equal(left: Any, right: Any) -> bool:
    return canonical(left) == canonical(right)


def deep_clone(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    return copy.deepcopy(value)


def has_changes(current: Any, baseline: Any = _UNSET) -> bool:
    """True when ``current`` differs structurally from ``baseline``.

    An unset (or None) baseline never reports changes.
    """
    if isinstance(baseline, Baseline):
        return baseline.has_changes(current)
    if baseline is _UNSET or baseline is None:
        return False
    return not deep_equal(current, baseline)


class Baseline:
    """Last-known-saved state used for dirty checks.

    Captured as a deep clone at hydration and replaced by a fresh deep clone
    after every successful save.
    """

    def __init__(self, value: Any = None):
        self._value = None
        if value is not None:
            self.capture(value)

    @property
    def is_set(self) -> bool:
        return self._value is not None

    @property
    def value(self) -> Any:
        return self._value

    def capture(self, value: Any) -> None:
        self._value = deep_clone(value)

    def clear(self) -> None:
        self._value = None

    def has_changes(self, current: Any) -> bool:
        if self._value is None:
            return False
        return not deep_equal(current, self._value)


# ---------------------------------------------------------------------------
# Terms comparator
# ---------------------------------------------------------------------------

def _blank_to_none(value: Any) -> Any:
    if value is None or value == "":
        return None
    return value


def _date_text(value: Any) -> str | None:
    value = _blank_to_none(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def _parse_rent(value: Any) -> Decimal | str | None:
    """Rent as a Decimal; unparseable text is returned as-is so it compares unequal."""
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return str(value)


def _stored_inclusions(value: Any) -> dict:
    if isinstance(value, Mapping):
        value = {k: v.model_dump() if isinstance(v, BaseModel) else v for k, v in value.items()}
    return parse_inclusions(value, strict=False)


def terms_have_changes(
    form: RentalFormState,
    application: Any,
    *,
    total_rent: Any = None,
) -> bool:
    """True when the rental form differs from the stored application terms.

    ``application`` may be an ORM row or an API response; None means no
    baseline and never reports changes. ``total_rent`` is only compared when
    the caller supplies a freshly computed value.
    """
    if application is None:
        return False

    stored_occupancy = getattr(application.occupancy_type, "value", application.occupancy_type)

    changed = (
        _date_text(form.move_in_date) != _date_text(application.move_in_date)
        or form.rental_duration != application.rental_duration
        or _parse_rent(form.proposed_rent) != _parse_rent(application.proposed_rent)
        or form.occupancy_type.value != stored_occupancy
        or _blank_to_none(form.message) != _blank_to_none(application.message)
        or not deep_equal(form.inclusions, _stored_inclusions(application.inclusions))
    )
    if changed:
        return True
    if total_rent is not None:
        return _parse_rent(total_rent) != _parse_rent(application.total_rent)
    return False
