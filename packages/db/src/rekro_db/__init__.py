# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    ApplicationStatus,
    ApplicationType,
    DocumentType,
    EmploymentStatus,
    InclusionType,
    ListingType,
    OccupancyType,
    StudentStatus,
    UserRole,
)
from .models import (
    Application,
    ApplicationProfile,
    ApplicationSnapshot,
    ImmutableSnapshotError,
    Property,
    Unit,
    User,
)

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "ApplicationStatus",
    "ApplicationType",
    "DocumentType",
    "EmploymentStatus",
    "InclusionType",
    "ListingType",
    "OccupancyType",
    "StudentStatus",
    "UserRole",
    # Models
    "Application",
    "ApplicationProfile",
    "ApplicationSnapshot",
    "ImmutableSnapshotError",
    "Property",
    "Unit",
    "User",
]
