from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .models import LedgerEvent, LedgerObject, Page

log = logging.getLogger(__name__)

OBJECT_OPTIONS = {
    "showType": True,
    "showContent": True,
    "showDisplay": True,
}


class LedgerQueryService(Protocol):
    """Read interface over the ledger that discovery and detail fetching depend on."""

    async def get_object(self, object_id: str) -> Optional[LedgerObject]: ...

    async def get_owned_objects(
        self, owner: str, cursor: Optional[str] = None, limit: int = 50
    ) -> Page[LedgerObject]: ...

    async def query_events(
        self,
        package_id: str,
        module: str,
        limit: int,
        descending: bool = True,
        cursor: Any = None,
    ) -> Page[LedgerEvent]: ...


class RpcClient:
    """Sui JSON-RPC client. One pooled AsyncClient, safe for concurrent calls."""

    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.client = client or httpx.AsyncClient(timeout=timeout_s)
        self._request_id = 0

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def get_object(self, object_id: str) -> Optional[LedgerObject]:
        """Returns the object, or None when the ledger reports it absent."""
        result = await self._call("sui_getObject", [object_id, OBJECT_OPTIONS])
        if not isinstance(result, dict) or not result.get("data"):
            if isinstance(result, dict) and result.get("error"):
                log.debug("Object %s unavailable: %s", object_id, result["error"])
            return None
        return parse_object(result["data"])

    async def get_owned_objects(
        self, owner: str, cursor: Optional[str] = None, limit: int = 50
    ) -> Page[LedgerObject]:
        query = {"filter": None, "options": OBJECT_OPTIONS}
        result = await self._call("suix_getOwnedObjects", [owner, query, cursor, limit])
        items: List[LedgerObject] = []
        for entry in result.get("data", []):
            # entry is {"data": {...}} or {"error": {...}}
            data = entry.get("data") if isinstance(entry, dict) else None
            if data:
                items.append(parse_object(data))
        return Page(
            items=items,
            has_next_page=bool(result.get("hasNextPage")),
            next_cursor=result.get("nextCursor"),
        )

    async def query_events(
        self,
        package_id: str,
        module: str,
        limit: int,
        descending: bool = True,
        cursor: Any = None,
    ) -> Page[LedgerEvent]:
        query = {"MoveModule": {"package": package_id, "module": module}}
        result = await self._call(
            "suix_queryEvents", [query, cursor, limit, descending]
        )
        items = [parse_event(e) for e in result.get("data", []) if isinstance(e, dict)]
        return Page(
            items=items,
            has_next_page=bool(result.get("hasNextPage")),
            next_cursor=result.get("nextCursor"),
        )

    async def get_dynamic_fields(
        self, parent_id: str, cursor: Optional[str] = None, limit: int = 50
    ) -> Page[Dict[str, Any]]:
        """Dynamic fields of a parent object. Used by diagnostics only."""
        result = await self._call("suix_getDynamicFields", [parent_id, cursor, limit])
        return Page(
            items=list(result.get("data", [])),
            has_next_page=bool(result.get("hasNextPage")),
            next_cursor=result.get("nextCursor"),
        )

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def _call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id(),
            "method": method,
            "params": params,
        }
        log.debug("RPC %s %s", method, params)
        resp = await self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            raise RuntimeError(f"RPC error: {data['error']}")
        return data.get("result", {})


def parse_object(data: Dict[str, Any]) -> LedgerObject:
    content = data.get("content")
    fields = None
    if isinstance(content, dict) and isinstance(content.get("fields"), dict):
        fields = content["fields"]

    display = None
    raw_display = data.get("display")
    if isinstance(raw_display, dict) and isinstance(raw_display.get("data"), dict):
        display = raw_display["data"]

    return LedgerObject(
        object_id=data.get("objectId"),
        type=data.get("type") or (content or {}).get("type"),
        version=data.get("version"),
        digest=data.get("digest"),
        fields=fields,
        display=display,
        has_content=bool(content),
    )


def parse_event(data: Dict[str, Any]) -> LedgerEvent:
    event_id = data.get("id") or {}
    ts = data.get("timestampMs")
    return LedgerEvent(
        type=data.get("type", ""),
        parsed_json=data.get("parsedJson"),
        tx_digest=event_id.get("txDigest") if isinstance(event_id, dict) else None,
        timestamp_ms=int(ts) if ts is not None else None,
    )
