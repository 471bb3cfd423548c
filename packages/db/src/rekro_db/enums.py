# This project was developed with assistance from AI tools.
"""
Domain enums for the rental application lifecycle.

Shared domain types used by both SQLAlchemy models (rekro_db package)
and Pydantic schemas (rekro_api package).
"""

import enum


class ApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses after which an application can no longer change."""
        return frozenset({cls.APPROVED, cls.REJECTED, cls.WITHDRAWN})

    @classmethod
    def editable_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses in which the applicant may still edit terms in place."""
        return frozenset({cls.SUBMITTED, cls.UNDER_REVIEW})

    @classmethod
    def valid_transitions(cls) -> dict["ApplicationStatus", frozenset["ApplicationStatus"]]:
        """Allowed status transitions in the application lifecycle."""
        return {
            # Never written; first persisted status is SUBMITTED
            cls.DRAFT: frozenset(),
            cls.SUBMITTED: frozenset(
                {cls.UNDER_REVIEW, cls.APPROVED, cls.REJECTED, cls.WITHDRAWN}
            ),
            cls.UNDER_REVIEW: frozenset({cls.APPROVED, cls.REJECTED, cls.WITHDRAWN}),
            cls.APPROVED: frozenset(),
            cls.REJECTED: frozenset(),
            cls.WITHDRAWN: frozenset(),
        }


class UserRole(str, enum.Enum):
    APPLICANT = "applicant"
    ADMIN = "admin"


class ApplicationType(str, enum.Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"


class OccupancyType(str, enum.Enum):
    SINGLE = "single"
    DUAL = "dual"


class ListingType(str, enum.Enum):
    ENTIRE_HOME = "entire_home"
    PRIVATE_ROOM = "private_room"
    SHARED_ROOM = "shared_room"


class InclusionType(str, enum.Enum):
    FURNITURE = "furniture"
    BILLS = "bills"
    CLEANING = "cleaning"
    CARPARK = "carpark"
    STORAGE = "storage"


class EmploymentStatus(str, enum.Enum):
    WORKING = "working"
    NOT_WORKING = "not_working"


class StudentStatus(str, enum.Enum):
    STUDENT = "student"
    NOT_STUDENT = "not_student"


class DocumentType(str, enum.Enum):
    PASSPORT = "passport"
    VISA = "visa"
    DRIVING_LICENSE = "drivingLicense"
    STUDENT_ID = "studentId"
    COE = "coe"
    EMPLOYMENT_LETTER = "employmentLetter"
    PAYSLIPS = "payslips"
    BANK_STATEMENT = "bankStatement"
    PROOF_OF_FUNDS = "proofOfFunds"
    REFERENCE_LETTER = "referenceLetter"
    GUARANTOR_LETTER = "guarantorLetter"
