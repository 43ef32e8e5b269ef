"""iTunes Store Client — default AppStore collaborator over Apple's public endpoints.

Invariants:
    - Implements the 8 AppStore protocol coroutines; each makes its own HTTP calls
    - Every failure is raised as StoreError; str(exc) is a human-readable message
    - Resource-missing failures say "not found (404)"; HTTP errors carry their status in parens
    - No retries, no caching: one logical store call per gateway request

Design Decisions:
    - One shared httpx.AsyncClient (connection pool) owned by the app lifespan
    - Query values arrive as strings (or numbers for list); parsing here is lenient,
      falsy/NaN values fall back to defaults like the JavaScript scraper clients do
    - privacy/version_history need the web bearer token scraped from the app page,
      then query amp-api (same flow apps.apple.com uses)
"""

import logging
import math
from typing import Any

import httpx

from appstore_gateway.infrastructure.itunes_parsers import (
    clean_list_entry, clean_review, extract_similar_ids, extract_token,
    feed_entries, parse_histogram, software_results,
)

logger = logging.getLogger(__name__)

ITUNES_URL = "https://itunes.apple.com"
LOOKUP_URL = f"{ITUNES_URL}/lookup"
SEARCH_URL = f"{ITUNES_URL}/search"
APP_PAGE_URL = "https://apps.apple.com/{country}/app/id{id}"
AMP_API_URL = "https://amp-api.apps.apple.com/v1/catalog/{country}/apps/{id}"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.8",
}

COLLECTIONS = frozenset({
    "topmacapps", "topfreemacapps", "topgrossingmacapps", "toppaidmacapps",
    "newapplications", "newfreeapplications", "newpaidapplications",
    "topfreeapplications", "topfreeipadapplications",
    "topgrossingapplications", "topgrossingipadapplications",
    "toppaidapplications", "toppaidipadapplications",
})
REVIEW_SORTS = {"recent": "mostrecent", "helpful": "mosthelpful"}

Records = list[dict[str, Any]]

MAX_LIST_NUM = 200
MAX_SEARCH_RESULTS = 200
MAX_REVIEW_PAGE = 10


class StoreError(Exception):
    """App store call failed. Message is shown to gateway clients as-is."""


class StoreRequestError(StoreError):
    """HTTP/transport failure talking to Apple."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ITunesStoreClient:
    """AppStore implementation backed by itunes.apple.com and apps.apple.com."""

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        default_country: str = "us",
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True,
            headers=DEFAULT_HEADERS,
        )
        self.default_country = default_country

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # ─── Operations ────────────────────────────────────────────

    async def app(self, params: dict[str, Any]) -> dict[str, Any]:
        country = self._country(params)
        if _given(params.get("id")):
            id_field, value = "id", params["id"]
        elif _given(params.get("appId")):
            id_field, value = "bundleId", params["appId"]
        else:
            raise StoreError("Either id or appId is required")
        results = await self._lookup(value, id_field, country, params.get("lang"))
        if not results:
            raise StoreError("App not found (404)")
        app = results[0]
        if _flag(params.get("ratings")):
            app.update(await self._ratings(app, country))
        return app

    async def list(self, params: dict[str, Any]) -> Records:
        collection = params.get("collection")
        if collection not in COLLECTIONS:
            raise StoreError(f"Invalid collection {collection}")
        num = _as_int(params.get("num"), 50)
        if num > MAX_LIST_NUM:
            raise StoreError(f"Cannot retrieve more than {MAX_LIST_NUM} apps")
        genre = ""
        category = params.get("category")
        if _given(category):
            category_id = _as_int(category, 0)
            if category_id <= 0:
                raise StoreError(f"Invalid category {category}")
            genre = f"/genre={category_id}"
        country = self._country(params)
        url = f"{ITUNES_URL}/{country}/rss/{collection}/limit={num}{genre}/json"
        payload = await self._get_json(url)
        return [clean_list_entry(entry) for entry in feed_entries(payload)]

    async def search(self, params: dict[str, Any]) -> Records:
        term = params.get("term")
        if not term:
            raise StoreError("term is required")
        num = _as_int(params.get("num"), 50)
        page = _as_int(params.get("page"), 1)
        query = {
            "term": term,
            "media": "software",
            "entity": "software",
            "country": self._country(params),
            "limit": min(num * page, MAX_SEARCH_RESULTS),
        }
        if params.get("lang"):
            query["lang"] = params["lang"]
        apps = software_results(await self._get_json(SEARCH_URL, params=query))
        start = (page - 1) * num
        return apps[start:start + num]

    async def developer(self, params: dict[str, Any]) -> Records:
        dev_id = params.get("devId")
        if not _given(dev_id):
            raise StoreError("devId is required")
        results = await self._lookup(
            dev_id, "id", self._country(params), params.get("lang"),
        )
        if not results:
            raise StoreError("Developer not found (404)")
        return results

    async def reviews(self, params: dict[str, Any]) -> Records:
        country = self._country(params)
        app_id = await self._resolve_id(params, country)
        page = _as_int(params.get("page"), 1)
        if page > MAX_REVIEW_PAGE:
            raise StoreError(f"Page cannot be greater than {MAX_REVIEW_PAGE}")
        sort = params.get("sort") or "recent"
        if sort not in REVIEW_SORTS:
            raise StoreError(f"Invalid sort {sort}")
        url = (
            f"{ITUNES_URL}/{country}/rss/customerreviews/page={page}"
            f"/id={app_id}/sortby={REVIEW_SORTS[sort]}/json"
        )
        payload = await self._get_json(url)
        return [clean_review(entry) for entry in feed_entries(payload)]

    async def similar(self, params: dict[str, Any]) -> Records:
        country = self._country(params)
        app_id = await self._resolve_id(params, country)
        html = await self._get_text(APP_PAGE_URL.format(country=country, id=app_id))
        ids = extract_similar_ids(html)
        if not ids:
            return []
        return await self._lookup(",".join(ids), "id", country, params.get("lang"))

    async def privacy(self, params: dict[str, Any]) -> dict[str, Any]:
        attributes = await self._amp_attributes(
            params, {"platform": "web", "fields": "privacyDetails"},
        )
        return attributes.get("privacyDetails") or {}

    async def version_history(self, params: dict[str, Any]) -> Records:
        attributes = await self._amp_attributes(params, {
            "platform": "web",
            "extend": "versionHistory",
            "additionalPlatforms": "appletv,ipad,iphone,mac",
        })
        ios = (attributes.get("platformAttributes") or {}).get("ios") or {}
        return ios.get("versionHistory") or []

    # ─── Helpers ───────────────────────────────────────────────

    def _country(self, params: dict[str, Any]) -> str:
        return str(params.get("country") or self.default_country).lower()

    async def _resolve_id(self, params: dict[str, Any], country: str) -> str:
        """Numeric app id from `id`, or looked up from the `appId` bundle id."""
        if _given(params.get("id")):
            return str(params["id"])
        if _given(params.get("appId")):
            app = await self.app({"appId": params["appId"], "country": country})
            return str(app["id"])
        raise StoreError("Either id or appId is required")

    async def _lookup(
        self, value: Any, id_field: str, country: str, lang: str | None = None,
    ) -> Records:
        query = {id_field: str(value), "country": country, "entity": "software"}
        if lang:
            query["lang"] = lang
        return software_results(await self._get_json(LOOKUP_URL, params=query))

    async def _ratings(self, app: dict[str, Any], country: str) -> dict[str, Any]:
        html = await self._get_text(APP_PAGE_URL.format(country=country, id=app["id"]))
        histogram = parse_histogram(html)
        ratings = sum(histogram.values()) if histogram else app.get("reviews")
        return {"ratings": ratings, "histogram": histogram}

    async def _amp_attributes(
        self, params: dict[str, Any], query: dict[str, str],
    ) -> dict[str, Any]:
        app_id = params.get("id")
        if not _given(app_id):
            raise StoreError("id is required")
        country = self._country(params)
        html = await self._get_text(APP_PAGE_URL.format(country=country, id=app_id))
        token = extract_token(html)
        if not token:
            raise StoreError("Could not find App Store web token on app page")
        payload = await self._get_json(
            AMP_API_URL.format(country=country, id=app_id),
            params=query,
            headers={
                "Origin": "https://apps.apple.com",
                "Authorization": f"Bearer {token}",
            },
        )
        data = payload.get("data") or []
        if not data:
            raise StoreError("App not found (404)")
        return data[0].get("attributes") or {}

    async def _get(
        self, url: str, *, params: dict | None = None, headers: dict | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise StoreRequestError(f"App Store request timed out: {url}") from e
        except httpx.HTTPError as e:
            raise StoreRequestError(f"App Store request failed: {e}") from e
        if response.status_code >= 400:
            logger.debug(
                f"App Store responded {response.status_code} for {url}",
                extra={"status_code": response.status_code},
            )
            raise StoreRequestError(
                f"App Store request failed ({response.status_code})",
                status_code=response.status_code,
            )
        return response

    async def _get_text(self, url: str) -> str:
        return (await self._get(url)).text

    async def _get_json(
        self, url: str, *, params: dict | None = None, headers: dict | None = None,
    ) -> dict[str, Any]:
        response = await self._get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise StoreRequestError("App Store returned an invalid JSON body") from e


def _given(value: Any) -> bool:
    """JavaScript truthiness for parameter values (0, "", NaN are absent)."""
    if value is None or value == "" or value == 0:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


def _as_int(value: Any, default: int) -> int:
    if not _given(value):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no")
    return bool(value)
