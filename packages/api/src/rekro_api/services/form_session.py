# This project was developed with assistance from AI tools.
"""Client-side rental form session.

Holds the form draft, the last-saved application (the terms baseline), and
an AutoSaver that pushes edits to the API through ApplicationsClient.
"""

import logging
from decimal import Decimal
from typing import Any

from ..client import ApplicationsClient
from ..core.errors import ValidationError
from ..schemas.application import ApplicationResponse, Inclusion, SubmitResponse
from ..schemas.rental_form import RentalFormState
from .autosave import AutoSaver
from .change_detection import Baseline, terms_have_changes
from .rental_form import (
    build_initial_form,
    normalize_occupancy_type,
    to_form_state,
    to_upsert_payload,
)

logger = logging.getLogger(__name__)


class RentalFormSession:
    """One applicant editing one application for one unit.

    Args:
        client: API client used for saves and submission.
        property_id: Property the application is for.
        unit: Selected unit (ORM row or any object with ``id``,
            ``listing_type``, ``max_occupants``, ``available_from``).
        application: Existing application to hydrate from, if any.
        total_rent: Weekly total computed by the pricing view.
        debounce_seconds: Auto-save quiescence window override.
    """

    def __init__(
        self,
        client: ApplicationsClient,
        *,
        property_id: int,
        unit: Any = None,
        application: ApplicationResponse | None = None,
        total_rent: Decimal | float | None = None,
        debounce_seconds: float | None = None,
    ):
        self.client = client
        self.property_id = property_id
        self.unit = unit
        self.total_rent = total_rent
        self.application = application
        self.baseline = Baseline(application)
        self.form = to_form_state(application) if application else build_initial_form(unit)
        self._autosaver = AutoSaver(self._save, debounce_seconds, on_saved=self._on_saved)
        if application is not None:
            self._autosaver.mark_saved(self.form)

    # -- dirty state -------------------------------------------------------

    @property
    def has_unsaved_changes(self) -> bool:
        return terms_have_changes(self.form, self.baseline.value, total_rent=self.total_rent)

    @property
    def is_saving(self) -> bool:
        return self._autosaver.is_saving

    # -- edits -------------------------------------------------------------

    def edit(self, **changes: Any) -> RentalFormState:
        """Apply field changes to the draft and schedule an auto-save."""
        data = self.form.model_dump()
        data.update(changes)
        form = RentalFormState.model_validate(data)
        form.occupancy_type = normalize_occupancy_type(form.occupancy_type, self.unit)
        self.form = form
        self._autosaver.schedule(form)
        return form

    def set_inclusion(
        self, name: str, *, selected: bool | None = None, price: float | None = None
    ) -> RentalFormState:
        current = self.form.inclusions.get(name, Inclusion())
        updated = Inclusion(
            selected=current.selected if selected is None else selected,
            price=current.price if price is None else price,
        )
        return self.edit(inclusions={**self.form.inclusions, name: updated})

    # -- persistence -------------------------------------------------------

    async def _save(self, state: RentalFormState) -> ApplicationResponse:
        payload = to_upsert_payload(
            state,
            property_id=self.property_id,
            unit=self.unit,
            application_id=self.application.id if self.application else None,
            total_rent=self.total_rent,
        )
        return await self.client.upsert(payload)

    def _on_saved(self, state: RentalFormState, result: ApplicationResponse) -> None:
        self.application = result
        self.baseline.capture(result)

    async def save_now(self) -> ApplicationResponse | None:
        """Save pending edits immediately; raises the last failure if one remains."""
        await self._autosaver.flush()
        if self._autosaver.has_pending and self._autosaver.last_error is not None:
            raise self._autosaver.last_error
        return self.application

    async def submit(self, note: str | None = None) -> SubmitResponse:
        if self._autosaver.has_pending or self.application is None:
            self._autosaver.schedule(self.form)
        await self.save_now()
        if self.application is None:
            raise ValidationError("Nothing to submit: the application has not been saved")

        result = await self.client.submit(self.application.id, note)
        self.application = result.application
        self.baseline.capture(result.application)
        return result

    async def withdraw(self, *, confirm: bool) -> ApplicationResponse:
        if self.application is None:
            raise ValidationError("Nothing to withdraw: the application has not been saved")
        result = await self.client.withdraw(self.application.id, confirm=confirm)
        self.application = result
        self.baseline.capture(result)
        return result

    async def aclose(self) -> None:
        await self._autosaver.aclose()
