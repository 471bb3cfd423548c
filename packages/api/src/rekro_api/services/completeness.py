# This project was developed with assistance from AI tools.
"""Profile completeness scorer.

Scores five profile sections from the applicant's personal details, the
application-intent answers, and the document registry. Four sections are
required and feed the overall percentage; "Additional Documents" is shown
but never gates submission.

Conditional checklists (residency by citizenship, income by employment and
student status) are looked up in dispatch tables keyed by the discriminant,
so adding a new status means adding one table entry.
"""

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from rekro_db import ApplicationProfile, User
from rekro_db.enums import DocumentType, EmploymentStatus, StudentStatus

from ..schemas.completeness import (
    ApplicationIntent,
    CompletenessReport,
    CompletenessSection,
    PersonalDetails,
)

logger = logging.getLogger(__name__)

Documents = Mapping[str, Any]
Checklist = Callable[[ApplicationIntent, Documents], list[bool]]

PERSONAL = "personal-details"
RESIDENCY = "visa-details"
INCOME = "income-details"
DOCUMENTS = "documents"
RENTAL = "location-preferences"

# (id, title, description, required)
_SECTIONS: tuple[tuple[str, str, str, bool], ...] = (
    (PERSONAL, "Personal Details", "Basic information about you", True),
    (RESIDENCY, "Visa Details", "Citizenship status and visa documentation", True),
    (INCOME, "Income Details", "Employment and financial information", True),
    (DOCUMENTS, "Additional Documents", "Upload remaining documents", False),
    (RENTAL, "Rental Preference", "Your preferred locality and budget", True),
)

_OPTIONAL_DOCUMENTS = (
    DocumentType.DRIVING_LICENSE,
    DocumentType.REFERENCE_LETTER,
    DocumentType.GUARANTOR_LETTER,
)

# Overall-percentage thresholds -> badge, checked cumulatively
_THRESHOLD_BADGES: tuple[tuple[int, str], ...] = (
    (25, "getting-started"),
    (50, "halfway-there"),
    (75, "almost-there"),
    (100, "profile-complete"),
)


# ---------------------------------------------------------------------------
# Primitive checks
# ---------------------------------------------------------------------------

def _filled(value: Any) -> bool:
    """A value counts when present; strings must be non-blank after trimming."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _has_document(documents: Documents, doc_type: DocumentType) -> bool:
    return documents.get(doc_type.value) is not None


def _is_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return not math.isnan(float(value))
    except (TypeError, ValueError):
        return False


def _is_member(enum_cls, value: Any) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percent(checks: list[bool]) -> int:
    if not checks:
        return 0
    return _round_half_up(100 * sum(checks) / len(checks))


# ---------------------------------------------------------------------------
# Section checklists
# ---------------------------------------------------------------------------

def _personal_checks(profile: PersonalDetails) -> list[bool]:
    return [
        _filled(profile.full_name),
        _filled(profile.username),
        _filled(profile.phone),
        _filled(profile.date_of_birth),
        _filled(profile.gender),
        _filled(profile.occupation),
        _filled(profile.bio),
        _filled(profile.native_language),
        _filled(profile.preferred_contact_method),
    ]


def _no_extra_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    return []


def _non_citizen_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    return [_filled(intent.visa_status), _has_document(documents, DocumentType.VISA)]


_RESIDENCY_CHECKLISTS: dict[bool | None, Checklist] = {
    True: _no_extra_checks,
    False: _non_citizen_checks,
    None: _no_extra_checks,
}


def _residency_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    checks = [
        intent.is_citizen is not None,
        _has_document(documents, DocumentType.PASSPORT),
    ]
    return checks + _RESIDENCY_CHECKLISTS[intent.is_citizen](intent, documents)


def _working_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    return [
        _filled(intent.employment_type),
        _filled(intent.income_source),
        _filled(intent.income_frequency),
        _is_number(intent.income_amount),
        _has_document(documents, DocumentType.PAYSLIPS),
    ]


def _student_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    return [
        _has_document(documents, DocumentType.STUDENT_ID),
        _has_document(documents, DocumentType.COE),
    ]


_STUDENT_CHECKLISTS: dict[str, Checklist] = {
    StudentStatus.STUDENT.value: _student_checks,
}


def _not_working_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    checks = [
        _is_member(StudentStatus, intent.student_status),
        _filled(intent.finance_support_type),
        _filled(intent.finance_support_details),
        _has_document(documents, DocumentType.PROOF_OF_FUNDS),
    ]
    extra = _STUDENT_CHECKLISTS.get(intent.student_status, _no_extra_checks)
    return checks + extra(intent, documents)


_EMPLOYMENT_CHECKLISTS: dict[str, Checklist] = {
    EmploymentStatus.WORKING.value: _working_checks,
    EmploymentStatus.NOT_WORKING.value: _not_working_checks,
}


def _income_checks(intent: ApplicationIntent, documents: Documents) -> list[bool]:
    status = intent.employment_status
    checks = [_is_member(EmploymentStatus, status)]
    extra = _EMPLOYMENT_CHECKLISTS.get(status, _no_extra_checks)
    return checks + extra(intent, documents)


def _optional_document_checks(documents: Documents) -> list[bool]:
    return [_has_document(documents, doc_type) for doc_type in _OPTIONAL_DOCUMENTS]


def _rental_checks(intent: ApplicationIntent) -> list[bool]:
    return [
        intent.max_budget_per_week is not None,
        _filled(intent.preferred_locality),
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def score(
    profile: PersonalDetails | None,
    intent: ApplicationIntent | None,
    documents: Documents | None = None,
) -> CompletenessReport:
    """Compute per-section and overall completion.

    A missing profile or intent yields zeroes for the affected sections
    rather than an error.
    """
    documents = documents or {}
    intent = intent or ApplicationIntent()

    percentages = {
        PERSONAL: _percent(_personal_checks(profile)) if profile is not None else 0,
        RESIDENCY: _percent(_residency_checks(intent, documents)),
        INCOME: _percent(_income_checks(intent, documents)),
        DOCUMENTS: _percent(_optional_document_checks(documents)),
        RENTAL: _percent(_rental_checks(intent)),
    }
    if profile is None:
        percentages = dict.fromkeys(percentages, 0)

    sections = [
        CompletenessSection(
            id=section_id,
            title=title,
            description=description,
            required=required,
            percentage=percentages[section_id],
            completed=percentages[section_id] == 100,
        )
        for section_id, title, description, required in _SECTIONS
    ]

    required = [s for s in sections if s.required]
    overall = _round_half_up(sum(s.percentage for s in required) / len(required))

    return CompletenessReport(
        sections=sections,
        overall=overall,
        is_complete=all(s.completed for s in required),
        badges=compute_badges(overall, sections),
    )


def compute_badges(overall: int, sections: list[CompletenessSection]) -> list[str]:
    """Badges earned at this moment. Recomputed on every call, never stored."""
    badges = [badge for threshold, badge in _THRESHOLD_BADGES if overall >= threshold]
    badges.extend(f"{s.id}-complete" for s in sections if s.required and s.completed)
    return badges


def intent_from_profile(application_profile: ApplicationProfile | None) -> ApplicationIntent | None:
    """Build scorer input from a persisted intent record."""
    if application_profile is None:
        return None
    return ApplicationIntent(
        is_citizen=application_profile.is_citizen,
        visa_status=application_profile.visa_status,
        employment_status=_enum_value(application_profile.employment_status),
        employment_type=application_profile.employment_type,
        income_source=application_profile.income_source,
        income_frequency=application_profile.income_frequency,
        income_amount=application_profile.income_amount,
        student_status=_enum_value(application_profile.student_status),
        finance_support_type=application_profile.finance_support_type,
        finance_support_details=application_profile.finance_support_details,
        max_budget_per_week=application_profile.max_budget_per_week,
        preferred_locality=application_profile.preferred_locality,
    )


def _enum_value(value: Any) -> str | None:
    return getattr(value, "value", value)


def score_user(user: User | None) -> CompletenessReport:
    """Score from persisted data alone: user row, intent record, documents."""
    if user is None:
        return score(None, None, None)
    application_profile = user.application_profile
    documents = (application_profile.documents if application_profile else None) or {}
    return score(
        PersonalDetails.model_validate(user),
        intent_from_profile(application_profile),
        documents,
    )


def is_profile_complete(user: User | None) -> bool:
    """Answer the submit gate from persisted data."""
    report = score_user(user)
    if not report.is_complete:
        logger.debug(
            "Profile incomplete for user=%s (overall=%s)",
            getattr(user, "id", None),
            report.overall,
        )
    return report.is_complete
