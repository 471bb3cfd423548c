# This project was developed with assistance from AI tools.
"""Rental form state builders.

Builds the initial form for a unit, hydrates form state from a stored
application, and turns form state back into an upsert payload.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from rekro_db.enums import ApplicationType, InclusionType, ListingType, OccupancyType

from ..core.errors import ValidationError
from ..schemas.application import ApplicationUpsert, Inclusion
from ..schemas.rental_form import RentalFormState
from .inclusions import dump_inclusions, parse_inclusions

DEFAULT_RENTAL_DURATION = 12

# Room listings come furnished with bills included unless the applicant opts out
_ROOM_DEFAULTS = frozenset({InclusionType.FURNITURE, InclusionType.BILLS})


def _is_entire_home(unit: Any) -> bool:
    if unit is None:
        return False
    listing_type = getattr(unit.listing_type, "value", unit.listing_type)
    return listing_type == ListingType.ENTIRE_HOME.value


def default_inclusions(is_entire_home: bool) -> dict[str, Inclusion]:
    return {
        t.value: Inclusion(selected=(not is_entire_home and t in _ROOM_DEFAULTS), price=0)
        for t in InclusionType
    }


def normalize_occupancy_type(occupancy_type: OccupancyType | str, unit: Any) -> OccupancyType:
    """Dual occupancy only for a non-entire-home unit that sleeps exactly two.

    With no unit selected the requested value is kept.
    """
    occupancy_type = OccupancyType(occupancy_type)
    if unit is None:
        return occupancy_type
    can_be_dual = not _is_entire_home(unit) and unit.max_occupants == 2
    if occupancy_type == OccupancyType.DUAL and not can_be_dual:
        return OccupancyType.SINGLE
    return occupancy_type


def min_move_in_date(available_from: date | None, today: date | None = None) -> date:
    today = today or date.today()
    if available_from is not None and available_from > today:
        return available_from
    return today


def build_initial_form(unit: Any, *, today: date | None = None) -> RentalFormState:
    """Fresh form for ``unit``: 12 months, single occupancy, default inclusions."""
    available_from = getattr(unit, "available_from", None)
    return RentalFormState(
        move_in_date=min_move_in_date(available_from, today).isoformat(),
        rental_duration=DEFAULT_RENTAL_DURATION,
        occupancy_type=normalize_occupancy_type(OccupancyType.SINGLE, unit),
        inclusions=default_inclusions(_is_entire_home(unit)),
        message="",
        proposed_rent="",
    )


def _rent_text(value: Any) -> str:
    if value is None or value == "":
        return ""
    return f"{Decimal(str(value)):f}"


def to_form_state(application: Any) -> RentalFormState:
    """Hydrate form state from a stored application (ORM row or API response)."""
    inclusions = application.inclusions or {}
    raw = {
        k: v.model_dump() if isinstance(v, Inclusion) else v for k, v in dict(inclusions).items()
    }
    move_in = application.move_in_date
    return RentalFormState(
        move_in_date=move_in.isoformat() if isinstance(move_in, date) else (move_in or ""),
        rental_duration=application.rental_duration or DEFAULT_RENTAL_DURATION,
        occupancy_type=application.occupancy_type or OccupancyType.SINGLE,
        inclusions=parse_inclusions(raw, strict=False),
        message=application.message or "",
        proposed_rent=_rent_text(application.proposed_rent),
    )


def application_type_for(unit: Any) -> ApplicationType:
    """Entire homes are applied for as a group; rooms individually."""
    return ApplicationType.GROUP if _is_entire_home(unit) else ApplicationType.INDIVIDUAL


def _parse_decimal(text: str, field: str) -> Decimal | None:
    text = text.strip()
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a number") from exc


def to_upsert_payload(
    form: RentalFormState,
    *,
    property_id: int,
    unit: Any = None,
    application_id: int | None = None,
    total_rent: Decimal | float | None = None,
) -> ApplicationUpsert:
    """Build the upsert request body for the current form state."""
    move_in = form.move_in_date.strip()
    try:
        move_in_date = date.fromisoformat(move_in) if move_in else None
    except ValueError as exc:
        raise ValidationError("Move-in date must be an ISO date") from exc

    return ApplicationUpsert(
        id=application_id,
        property_id=property_id,
        unit_id=getattr(unit, "id", None),
        application_type=application_type_for(unit),
        move_in_date=move_in_date,
        rental_duration=form.rental_duration,
        proposed_rent=_parse_decimal(form.proposed_rent, "Proposed rent"),
        total_rent=Decimal(str(total_rent)) if total_rent is not None else None,
        inclusions=dump_inclusions(form.inclusions),
        occupancy_type=normalize_occupancy_type(form.occupancy_type, unit),
        message=form.message or None,
    )
