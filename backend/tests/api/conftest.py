"""API test fixtures — gateway app wired to a RecordingStore, served over ASGITransport.

Invariants:
    - Every test gets a fresh RecordingStore and app
    - Settings built explicitly (no .env file)
    - Lifespan not run: no logging reconfiguration, no real store client
"""

import pytest

from tests.api.gateway_client import build_gateway, client_for
from tests.fake_store import RecordingStore


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def gateway(store):
    return build_gateway(store)


@pytest.fixture
async def client(gateway):
    async with client_for(gateway) as c:
        yield c


@pytest.fixture
async def anonymous(gateway):
    async with client_for(gateway, api_key=None) as c:
        yield c
