# This project was developed with assistance from AI tools.
"""Inclusion map parsing.

Two modes over the five known inclusion types:

- strict (write path): unknown keys are ignored. A known key must carry both
  a boolean ``selected`` and a ``price`` (finite number or numeric string,
  not negative); anything else raises ValidationError.
- coerce (hydrating stored rows): each field falls back on its own, so a
  valid price survives a broken ``selected`` and vice versa. A non-object
  entry becomes ``{selected: False, price: 0}``.
"""

import math
from collections.abc import Mapping
from typing import Any

from rekro_db.enums import InclusionType

from ..core.errors import ValidationError
from ..schemas.application import Inclusion

INCLUSION_KEYS: tuple[str, ...] = tuple(t.value for t in InclusionType)


def _to_price(value: Any) -> float | None:
    """Finite, non-negative number from a number or numeric string; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, int | float):
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def _parse_entry(name: str, raw: Any, strict: bool) -> Inclusion:
    if not isinstance(raw, Mapping):
        if strict:
            raise ValidationError(f"Inclusion '{name}' must be an object with selected and price")
        return Inclusion()

    selected = raw.get("selected")
    if not isinstance(selected, bool):
        selected = None
    price = _to_price(raw.get("price"))

    if strict:
        if selected is None:
            raise ValidationError(f"Inclusion '{name}' selected must be a boolean")
        if price is None:
            raise ValidationError(f"Inclusion '{name}' price must be a non-negative number")

    return Inclusion(
        selected=selected if selected is not None else False,
        price=price if price is not None else 0,
    )


def parse_inclusions(raw: Any, *, strict: bool = True) -> dict[str, Inclusion]:
    """Parse a raw inclusion map into known-key Inclusion entries.

    Only keys present in ``raw`` with a non-null value (and known) appear in
    the result.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        if strict:
            raise ValidationError("Inclusions must be an object keyed by inclusion name")
        return {}

    return {
        name: _parse_entry(name, raw[name], strict)
        for name in INCLUSION_KEYS
        if raw.get(name) is not None
    }


def dump_inclusions(inclusions: Mapping[str, Inclusion]) -> dict[str, dict[str, Any]]:
    """JSON-ready form for the inclusions column."""
    return {name: inc.model_dump() for name, inc in inclusions.items()}
