# ===========================
# jobscore/auth.py — bearer token verification against Supabase Auth
# ===========================

from dataclasses import dataclass
from typing import Optional

import httpx

from jobscore.errors import Unauthorized, UpstreamAuthError
from jobscore.log import get_logger

log = get_logger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthContext:
    """Credential presented with a request, passed explicitly to every operation."""
    bearer_token: Optional[str] = None

    @classmethod
    def from_header(cls, authorization: Optional[str]) -> "AuthContext":
        if not authorization:
            return cls()
        token = authorization.strip()
        scheme, _, credentials = token.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()
        return cls(bearer_token=token or None)


class SupabaseIdentityProvider:
    """Resolves a bearer token to a user id via GET /auth/v1/user."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport

    async def verify(self, token: str) -> str:
        if not self.base_url:
            raise UpstreamAuthError("Identity provider is not configured")

        headers = {"apikey": self.anon_key, "Authorization": f"{BEARER_PREFIX}{token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            log.warning("Identity provider request failed: %s", e)
            raise UpstreamAuthError("Identity provider unavailable") from e

        if r.status_code >= 500:
            log.warning("Identity provider returned %s", r.status_code)
            raise UpstreamAuthError("Identity provider unavailable")
        if r.status_code != 200:
            raise Unauthorized("Unauthorized")

        try:
            body = r.json()
        except ValueError:
            body = None
        user_id = body.get("id") if isinstance(body, dict) else None
        if not user_id:
            raise Unauthorized("Unauthorized")
        return str(user_id)


async def resolve_user(auth: AuthContext, identity) -> str:
    """Checks the auth precondition shared by every operation."""
    if not auth.bearer_token:
        raise Unauthorized("No authorization header")
    return await identity.verify(auth.bearer_token)
