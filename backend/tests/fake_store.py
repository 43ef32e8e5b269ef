"""Recording Store — in-memory AppStore double for dispatch and route tests.

Invariants:
    - Records every call as (operation, params) in call order
    - Returns the configured payload, or raises the configured exception, per operation
    - Unconfigured operations return an empty list
"""

from typing import Any


class RecordingStore:
    """AppStore spy. Configure with payloads= and failures= keyed by method name."""

    def __init__(
        self,
        payloads: dict[str, Any] | None = None,
        failures: dict[str, Exception] | None = None,
    ):
        self._payloads = payloads or {}
        self._failures = failures or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def _respond(self, operation: str, params: dict[str, Any]) -> Any:
        self.calls.append((operation, params))
        if operation in self._failures:
            raise self._failures[operation]
        return self._payloads.get(operation, [])

    async def app(self, params):
        return await self._respond("app", params)

    async def list(self, params):
        return await self._respond("list", params)

    async def search(self, params):
        return await self._respond("search", params)

    async def developer(self, params):
        return await self._respond("developer", params)

    async def reviews(self, params):
        return await self._respond("reviews", params)

    async def similar(self, params):
        return await self._respond("similar", params)

    async def privacy(self, params):
        return await self._respond("privacy", params)

    async def version_history(self, params):
        return await self._respond("version_history", params)
