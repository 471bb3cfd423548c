# This project was developed with assistance from AI tools.
"""
Bearer-token authentication against the Keycloak realm.

Tokens are RS256 JWTs verified with the realm's published signing keys.
Applicants own their applications; reviewers carry the realm ``admin`` role.

Set AUTH_DISABLED=true to bypass validation (tests / local dev without Keycloak).
"""

import logging
import time
from typing import Annotated

import httpx
import jwt
from fastapi import Depends, HTTPException, Request, status
from rekro_db.enums import UserRole

from ..core.config import settings
from ..schemas.auth import TokenPayload, UserContext

logger = logging.getLogger(__name__)


def _realm_url() -> str:
    return f"{settings.KEYCLOAK_URL}/realms/{settings.KEYCLOAK_REALM}"


# ---------------------------------------------------------------------------
# Signing keys
# ---------------------------------------------------------------------------

class JWKSCache:
    """Realm signing keys, refetched when stale or when a token names an unknown kid."""

    def __init__(self) -> None:
        self._keys: jwt.PyJWKSet | None = None
        self._fetched_at = 0.0

    def clear(self) -> None:
        self._keys = None
        self._fetched_at = 0.0

    async def _fetch(self) -> jwt.PyJWKSet:
        url = f"{_realm_url()}/protocol/openid-connect/certs"
        async with httpx.AsyncClient(timeout=5) as client:
            response = await client.get(url)
            response.raise_for_status()
        return jwt.PyJWKSet.from_dict(response.json())

    async def _key_set(self, force_refresh: bool) -> jwt.PyJWKSet:
        stale = time.monotonic() - self._fetched_at > settings.JWKS_CACHE_TTL
        if self._keys is None or stale or force_refresh:
            self._keys = await self._fetch()
            self._fetched_at = time.monotonic()
        return self._keys

    async def signing_key(self, kid: str | None) -> jwt.PyJWK:
        """Key for ``kid``. Raises 503 if the realm cannot be reached."""
        try:
            for force_refresh in (False, True):
                key_set = await self._key_set(force_refresh)
                match = next((k for k in key_set.keys if k.key_id == kid), None)
                if match is not None:
                    return match
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch signing keys from Keycloak: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authentication service unavailable",
            ) from exc
        raise jwt.InvalidTokenError(f"No signing key for kid={kid}")


jwks_cache = JWKSCache()


# ---------------------------------------------------------------------------
# Token handling
# ---------------------------------------------------------------------------

def bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


async def verify_token(token: str) -> TokenPayload:
    """Check signature, expiry, and issuer; return the claims."""
    header = jwt.get_unverified_header(token)
    signing_key = await jwks_cache.signing_key(header.get("kid"))
    claims = jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=_realm_url(),
        options={"verify_aud": False},
    )
    return TokenPayload(**claims)


def _resolve_role(token_payload: TokenPayload) -> UserRole:
    """Reviewer if the realm grants ``admin``; every other caller is an applicant."""
    if UserRole.ADMIN.value in token_payload.realm_roles:
        return UserRole.ADMIN
    return UserRole.APPLICANT


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

_DISABLED_USER = UserContext(
    user_id="dev-user",
    role=UserRole.APPLICANT,
    email="dev@rekro.local",
    name="Dev User",
)


async def get_current_user(request: Request) -> UserContext:
    """Resolve the caller from the bearer token (a dev applicant when auth is off)."""
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = bearer_token(request)
    if token is None:
        raise _unauthorized("Missing authentication token")

    try:
        claims = await verify_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise _unauthorized("Invalid token") from exc

    return UserContext(
        user_id=claims.sub,
        role=_resolve_role(claims),
        email=claims.email,
        name=claims.name or claims.preferred_username,
    )


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory restricting a route to ``allowed_roles``.

    Usage:
        @router.patch("/{id}/status", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """

    async def _check(user: CurrentUser) -> UserContext:
        if user.role in allowed_roles:
            return user
        logger.warning(
            "RBAC denied: user=%s role=%s needs one of %s",
            user.user_id,
            user.role.value,
            [r.value for r in allowed_roles],
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")

    return _check
