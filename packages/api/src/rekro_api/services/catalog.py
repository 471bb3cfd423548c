# This project was developed with assistance from AI tools.
"""Read-only lookups against the property/unit catalog."""

from rekro_db import Property, Unit
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ValidationError


async def get_unit(session: AsyncSession, unit_id: int) -> Unit | None:
    result = await session.execute(select(Unit).where(Unit.id == unit_id))
    return result.scalar_one_or_none()


async def validate_property_unit(
    session: AsyncSession,
    property_id: int,
    unit_id: int | None,
) -> Unit | None:
    """Check the property exists and, when given, that the unit belongs to it."""
    result = await session.execute(select(Property.id).where(Property.id == property_id))
    if result.scalar_one_or_none() is None:
        raise ValidationError(f"Property {property_id} does not exist")

    if unit_id is None:
        return None

    unit = await get_unit(session, unit_id)
    if unit is None or unit.property_id != property_id:
        raise ValidationError(f"Unit {unit_id} does not belong to property {property_id}")
    return unit
