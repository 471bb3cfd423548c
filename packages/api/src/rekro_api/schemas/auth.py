# This project was developed with assistance from AI tools.
"""Caller identity: decoded Keycloak claims and the per-request user."""

from pydantic import BaseModel, ConfigDict, Field
from rekro_db.enums import UserRole


class TokenPayload(BaseModel):
    """Claims we read from a realm-issued access token."""

    sub: str
    email: str = ""
    preferred_username: str = ""
    name: str = ""
    realm_access: dict = Field(default_factory=dict)

    @property
    def realm_roles(self) -> set[str]:
        return set(self.realm_access.get("roles", []))


class UserContext(BaseModel):
    """The authenticated caller, resolved once per request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
    email: str
    name: str

    @property
    def is_reviewer(self) -> bool:
        return self.role == UserRole.ADMIN
