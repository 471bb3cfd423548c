# This project was developed with assistance from AI tools.
"""In-memory rental form draft."""

from pydantic import BaseModel, Field
from rekro_db.enums import OccupancyType

from .application import Inclusion


class RentalFormState(BaseModel):
    """Proposed lease terms as edited on the rental form.

    ``move_in_date``, ``message``, and ``proposed_rent`` hold raw form text
    (ISO date, free text, decimal string); empty string means unset.
    """

    move_in_date: str = ""
    rental_duration: int = 12
    occupancy_type: OccupancyType = OccupancyType.SINGLE
    inclusions: dict[str, Inclusion] = Field(default_factory=dict)
    message: str = ""
    proposed_rent: str = ""
