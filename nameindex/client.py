from typing import Any, Dict, List, Optional, Sequence
import httpx

from nameindex import config


def criterion(topic0: str, address: Optional[str] = None) -> Dict[str, str]:
    c = {"topic0": topic0}
    if address:
        c["address"] = address.lower()
    return c


class LogClient:
    """
    Thin client for a Thor node's REST API: chain head and filtered event logs.
    HTTP errors are raised to the caller as httpx exceptions, never retried.
    """

    def __init__(self, node_url: str, *, timeout: float = config.HTTP_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.node_url = node_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.node_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "LogClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def best_block(self) -> int:
        r = await self.client.get("/blocks/best")
        r.raise_for_status()
        return int(r.json()["number"])

    async def query_logs(self, criteria_set: Sequence[Dict[str, str]], from_block: int, to_block: int,
                         *, offset: int = 0, limit: int = config.PAGE_SIZE,
                         order: str = "asc") -> List[Dict[str, Any]]:
        body = {
            "range": {"unit": "block", "from": from_block, "to": to_block},
            "options": {"offset": offset, "limit": limit},
            "criteriaSet": list(criteria_set),
            "order": order,
        }
        r = await self.client.post("/logs/event", json=body)
        r.raise_for_status()
        return r.json() or []

    async def aclose(self) -> None:
        await self.client.aclose()
