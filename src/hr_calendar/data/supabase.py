from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from supabase import AsyncClient, acreate_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """Raised when accessing the Supabase client before initialization."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the async Supabase client."""

    settings: SupabaseSettings
    _client: Optional[AsyncClient] = None

    async def ensure_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise SupabaseNotInitializedError(f"Supabase settings are incomplete; set {missing}.")
        self._client = await acreate_client(self.settings.url, self.settings.key)
        return self._client

    async def table(self, name: str):
        client = await self.ensure_client()
        return client.table(name)

    async def rpc(self, function: str, params: Dict[str, Any]) -> Any:
        client = await self.ensure_client()
        response = await client.rpc(function, params).execute()
        return response.data
