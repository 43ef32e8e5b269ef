"""Store Protocols — structural interface of the app store collaborator.

Invariants:
    - Every method is async, takes one parameter mapping and returns a JSON-serializable value
    - Failures are raised as exceptions; str(exc) is the only thing the gateway reads
    - Method names match OperationKind, with versionHistory spelled version_history

Design Decisions:
    - typing.Protocol over ABC: test fakes and alternative clients need no base class
"""

from typing import Any, Protocol


class AppStore(Protocol):
    """The downstream collaborator wrapped by the gateway."""

    async def app(self, params: dict[str, Any]) -> Any: ...

    async def list(self, params: dict[str, Any]) -> Any: ...

    async def search(self, params: dict[str, Any]) -> Any: ...

    async def developer(self, params: dict[str, Any]) -> Any: ...

    async def reviews(self, params: dict[str, Any]) -> Any: ...

    async def similar(self, params: dict[str, Any]) -> Any: ...

    async def privacy(self, params: dict[str, Any]) -> Any: ...

    async def version_history(self, params: dict[str, Any]) -> Any: ...
