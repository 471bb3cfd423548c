# This project was developed with assistance from AI tools.
"""
Rekro -- domain models

Rental application lifecycle models covering applicant profiles, the
property/unit catalog reference, applications, and immutable application
snapshots.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    event,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    ApplicationStatus,
    ApplicationType,
    EmploymentStatus,
    ListingType,
    OccupancyType,
    StudentStatus,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ImmutableSnapshotError(RuntimeError):
    """Raised when code attempts to modify a persisted application snapshot."""


class User(Base):
    """Applicant profile (personal details) keyed by the identity provider subject."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    full_name = Column(String(200), nullable=True)
    username = Column(String(100), nullable=True, unique=True)
    phone = Column(String(50), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    occupation = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)
    native_language = Column(String(100), nullable=True)
    preferred_contact_method = Column(String(50), nullable=True)
    image_url = Column(Text, nullable=True)
    discoverable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application_profile = relationship(
        "ApplicationProfile", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )
    applications = relationship("Application", back_populates="applicant")

    def __repr__(self):
        return f"<User(id='{self.id}', name='{self.full_name}')>"


class ApplicationProfile(Base):
    """Application-intent record embedded in the applicant profile."""

    __tablename__ = "user_application_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True,
    )
    # -- Residency --
    is_citizen = Column(Boolean, nullable=True)
    visa_status = Column(String(100), nullable=True)
    # -- Employment / study --
    employment_status = Column(
        Enum(EmploymentStatus, name="employment_status", native_enum=False),
        nullable=True,
    )
    employment_type = Column(String(100), nullable=True)
    income_source = Column(String(200), nullable=True)
    income_frequency = Column(String(50), nullable=True)
    income_amount = Column(Float, nullable=True)
    student_status = Column(
        Enum(StudentStatus, name="student_status", native_enum=False),
        nullable=True,
    )
    finance_support_type = Column(String(100), nullable=True)
    finance_support_details = Column(Text, nullable=True)
    # -- Rental preferences --
    max_budget_per_week = Column(Numeric(10, 2), nullable=True)
    preferred_locality = Column(String(200), nullable=True)
    has_pets = Column(Boolean, nullable=True)
    smoker = Column(Boolean, nullable=True)
    # -- Emergency contact --
    emergency_contact_name = Column(String(200), nullable=True)
    emergency_contact_phone = Column(String(50), nullable=True)
    # document type -> {url, path, filename, uploaded_at}
    documents = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="application_profile")

    def __repr__(self):
        return f"<ApplicationProfile(user_id='{self.user_id}')>"


class Property(Base):
    """Catalog reference for a rentable property. Owned by the listings service."""

    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    units = relationship("Unit", back_populates="property", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Property(id={self.id}, title='{self.title}')>"


class Unit(Base):
    """Catalog reference for a unit within a property."""

    __tablename__ = "units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = Column(String(255), nullable=True)
    listing_type = Column(
        Enum(ListingType, name="listing_type", native_enum=False),
        nullable=False,
        default=ListingType.PRIVATE_ROOM,
    )
    max_occupants = Column(Integer, nullable=False, default=1)
    available_from = Column(Date, nullable=True)

    property = relationship("Property", back_populates="units")

    def __repr__(self):
        return f"<Unit(id={self.id}, property_id={self.property_id})>"


class Application(Base):
    """Rental application: one proposal for one unit of one property."""

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    applicant_id = Column(
        String(255), ForeignKey("users.id"), nullable=False, index=True,
    )
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=True)
    application_type = Column(
        Enum(ApplicationType, name="application_type", native_enum=False),
        nullable=False,
    )
    status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=False,
        default=ApplicationStatus.SUBMITTED,
    )
    message = Column(Text, nullable=True)
    move_in_date = Column(Date, nullable=True)
    rental_duration = Column(Integer, nullable=True)
    proposed_rent = Column(Numeric(10, 2), nullable=True)
    total_rent = Column(Numeric(10, 2), nullable=True)
    inclusions = Column(JSON, nullable=False, default=dict)
    occupancy_type = Column(
        Enum(OccupancyType, name="occupancy_type", native_enum=False),
        nullable=False,
        default=OccupancyType.SINGLE,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    applicant = relationship("User", back_populates="applications")
    snapshots = relationship(
        "ApplicationSnapshot", back_populates="application", passive_deletes=True,
    )

    def __repr__(self):
        return f"<Application(id={self.id}, status='{self.status}')>"


class ApplicationSnapshot(Base):
    """Immutable, append-only frozen copy of application terms and profile."""

    __tablename__ = "application_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    snapshot = Column(JSON, nullable=False)
    created_by = Column(String(255), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="snapshots")

    def __repr__(self):
        return f"<ApplicationSnapshot(id={self.id}, app_id={self.application_id})>"


@event.listens_for(ApplicationSnapshot, "before_update")
def _reject_snapshot_update(mapper, connection, target):
    raise ImmutableSnapshotError(
        f"Application snapshot {target.id} is immutable and cannot be updated"
    )
