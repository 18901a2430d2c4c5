"""Identity resolution against the Farcaster social graph (Neynar v2 API)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..types import LookupNotFoundError, UserProfile


logger = logging.getLogger(__name__)


class IdentityResolver(ABC):
    """Resolves handles and fids to user profiles."""

    @abstractmethod
    async def search(self, handle: str) -> UserProfile:
        """Return the best match for ``handle`` or raise LookupNotFoundError."""
        ...

    @abstractmethod
    async def get_by_fid(self, fid: int) -> UserProfile:
        """Return the profile for ``fid`` or raise LookupNotFoundError."""
        ...

    async def aclose(self):
        """Release network resources held by the resolver."""
        pass


class NeynarIdentityResolver(IdentityResolver):
    """Neynar REST client.

    Every failure mode (missing API key, transport error, non-2xx status,
    empty result set) surfaces as LookupNotFoundError so callers have a
    single recoverable error to handle.
    """

    def __init__(
        self,
        api_url: str = "https://api.neynar.com",
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self):
        await self._client.aclose()

    async def search(self, handle: str) -> UserProfile:
        data = await self._get("/v2/farcaster/user/search", {"q": handle, "limit": 1}, handle)
        users = (data.get("result") or {}).get("users") or []
        if not users:
            raise LookupNotFoundError(f"No user matches '{handle}'", query=handle)
        return _to_profile(users[0], handle)

    async def get_by_fid(self, fid: int) -> UserProfile:
        data = await self._get("/v2/farcaster/user/bulk", {"fids": str(fid)}, str(fid))
        users = data.get("users") or []
        if not users:
            raise LookupNotFoundError(f"No user with fid {fid}", query=str(fid))
        return _to_profile(users[0], str(fid))

    async def _get(self, path: str, params: Dict[str, Any], query: str) -> Dict[str, Any]:
        if not self.api_key:
            logger.warning("NEYNAR_API_KEY is not configured, identity lookup cannot run")
            raise LookupNotFoundError("Identity service API key is not configured", query=query)

        url = f"{self.api_url}{path}"
        try:
            response = await self._client.get(
                url,
                params=params,
                headers={"api_key": self.api_key, "accept": "application/json"}
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Identity lookup {path} for '{query}' failed: {e}")
            raise LookupNotFoundError(f"Identity service request failed: {e}", query=query) from e
        except ValueError as e:
            logger.warning(f"Identity service returned invalid JSON for '{query}': {e}")
            raise LookupNotFoundError("Identity service returned invalid JSON", query=query) from e


def _to_profile(user: Dict[str, Any], query: str) -> UserProfile:
    try:
        return UserProfile.model_validate(user)
    except ValidationError as e:
        raise LookupNotFoundError(f"Identity service returned an unusable user: {e}", query=query) from e
