"""Root conftest — shared test configuration."""

import os

# Ensure tests never depend on a developer's real key
os.environ.setdefault("API_KEY", "test-api-key")
