"""Smoke Test Runner — exercises every endpoint of a running gateway.

Usage:
    API_KEY=... API_BASE_URL=http://localhost:8081 python -m appstore_gateway.smoke

Invariants:
    - Hits a live gateway (and through it, Apple); never imported by the app
    - Exit code 0 only when every check passes; 1 on any failure or missing API_KEY
    - One check failing never stops the remaining checks

Design Decisions:
    - Checks declared as data (SmokeCheck list) so the report order is the run order
    - Synchronous httpx.Client: checks run one at a time, output stays readable
"""

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_BASE_URL = "http://localhost:8081"
REQUEST_TIMEOUT_SECONDS = 30.0
CANDY_CRUSH_ID = "553834731"
KING_DEVELOPER_ID = "526656015"


class CheckFailed(Exception):
    """A smoke check got an unexpected response."""


@dataclass
class SmokeCheck:
    name: str
    path: str
    validate: Callable[[httpx.Response], str]
    params: dict[str, Any] = field(default_factory=dict)
    api_key: str | None = None


@dataclass
class CheckResult:
    name: str
    passed: bool
    detail: str


def _expect_app(response: httpx.Response) -> str:
    body = _ok_json(response)
    if not isinstance(body, dict) or not body.get("id") or not body.get("title"):
        raise CheckFailed("Invalid app data structure")
    return f"App: {body['title']} (ID: {body['id']})"


def _expect_non_empty_list(what: str) -> Callable[[httpx.Response], str]:
    def validate(response: httpx.Response) -> str:
        body = _ok_json(response)
        if not isinstance(body, list) or not body:
            raise CheckFailed(f"{what} returned no results")
        return f"Found {len(body)} {what.lower()}"
    return validate


def _expect_list(what: str) -> Callable[[httpx.Response], str]:
    def validate(response: httpx.Response) -> str:
        body = _ok_json(response)
        if not isinstance(body, list):
            raise CheckFailed(f"{what} returned invalid data")
        return f"Found {len(body)} {what.lower()}"
    return validate


def _expect_object(response: httpx.Response) -> str:
    body = _ok_json(response)
    if not isinstance(body, dict):
        raise CheckFailed("Privacy data returned invalid structure")
    return "Privacy data retrieved"


def _expect_status(status_code: int) -> Callable[[httpx.Response], str]:
    def validate(response: httpx.Response) -> str:
        if response.status_code != status_code:
            raise CheckFailed(
                f"Should have returned {status_code}, got {response.status_code}",
            )
        return f"Correctly returned {status_code}"
    return validate


def _ok_json(response: httpx.Response) -> Any:
    if response.status_code != 200:
        raise CheckFailed(
            f"HTTP {response.status_code}: {response.text[:200]}",
        )
    return response.json()


def default_checks() -> list[SmokeCheck]:
    return [
        SmokeCheck("Get App Details", f"/app/{CANDY_CRUSH_ID}", _expect_app),
        SmokeCheck(
            "Get App Details with Ratings", f"/app/{CANDY_CRUSH_ID}",
            _expect_app, params={"ratings": "true"},
        ),
        SmokeCheck(
            "Search Apps", "/search", _expect_non_empty_list("Apps"),
            params={"term": "candy crush", "num": 5},
        ),
        SmokeCheck(
            "Get Top Free Apps", "/list/topfreeapplications",
            _expect_non_empty_list("Top free apps"), params={"num": 10},
        ),
        SmokeCheck(
            "Get Top Free Games", "/list/topfreeapplications",
            _expect_non_empty_list("Top free games"),
            params={"category": 6014, "num": 5},
        ),
        SmokeCheck(
            "Get Developer Apps", f"/developer/{KING_DEVELOPER_ID}",
            _expect_non_empty_list("Developer apps"),
        ),
        SmokeCheck(
            "Get App Reviews", f"/reviews/{CANDY_CRUSH_ID}",
            _expect_list("Reviews"), params={"page": 1, "sort": "recent"},
        ),
        SmokeCheck(
            "Get Similar Apps", f"/similar/{CANDY_CRUSH_ID}",
            _expect_list("Similar apps"),
        ),
        SmokeCheck("Get App Privacy", f"/privacy/{CANDY_CRUSH_ID}", _expect_object),
        SmokeCheck(
            "Get Version History", f"/version-history/{CANDY_CRUSH_ID}",
            _expect_list("Version entries"),
        ),
        SmokeCheck(
            "Error Handling (404)", "/app/invalid_id_12345", _expect_status(404),
        ),
        SmokeCheck(
            "Authentication Error (401)", f"/app/{CANDY_CRUSH_ID}",
            _expect_status(401), api_key="invalid_key",
        ),
    ]


class SmokeRunner:
    """Runs checks in order against one gateway and collects results."""

    def __init__(self, client: httpx.Client, api_key: str):
        self._client = client
        self._api_key = api_key
        self.results: list[CheckResult] = []

    def run(self, checks: list[SmokeCheck]) -> list[CheckResult]:
        for check in checks:
            print(f"Testing: {check.name}")
            result = self._run_one(check)
            status = "PASSED" if result.passed else f"FAILED: {result.detail}"
            print(f"  {check.name} - {status}")
            if result.passed:
                print(f"    {result.detail}")
            self.results.append(result)
        return self.results

    def _run_one(self, check: SmokeCheck) -> CheckResult:
        try:
            response = self._client.get(
                check.path,
                params=check.params,
                headers={"x-api-key": check.api_key or self._api_key},
            )
            detail = check.validate(response)
        except (CheckFailed, httpx.HTTPError, ValueError) as e:
            return CheckResult(check.name, False, str(e))
        return CheckResult(check.name, True, detail)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    def summary(self) -> str:
        total = len(self.results) or 1
        lines = [
            "=" * 50,
            "TEST SUMMARY",
            "=" * 50,
            f"Passed: {self.passed}",
            f"Failed: {self.failed}",
            f"Success Rate: {self.passed / total * 100:.1f}%",
        ]
        failures = [r for r in self.results if not r.passed]
        if failures:
            lines.append("")
            lines.append("Failed Tests:")
            lines.extend(f"  - {r.name}: {r.detail}" for r in failures)
        lines.append("=" * 50)
        if failures:
            lines.append("Some tests failed. Check the server logs and configuration.")
        else:
            lines.append("All tests passed! The gateway is working correctly.")
        return "\n".join(lines)


def main() -> int:
    api_key = os.environ.get("API_KEY")
    if not api_key:
        print("API_KEY not found in environment variables", file=sys.stderr)
        return 1
    base_url = os.environ.get("API_BASE_URL", DEFAULT_BASE_URL)
    print("Starting App Store Gateway smoke tests...\n")
    with httpx.Client(base_url=base_url, timeout=REQUEST_TIMEOUT_SECONDS) as client:
        runner = SmokeRunner(client, api_key)
        runner.run(default_checks())
    print("\n" + runner.summary())
    return 0 if runner.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
