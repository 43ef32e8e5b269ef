"""iTunes Parsers — pure transforms from Apple payloads to the gateway's app/review shapes.

Invariants:
    - Output keys are camelCase and stable across endpoints (id, appId, title, ...)
    - Missing source fields become None, never KeyError
    - Feeds with a single entry (Apple returns a dict, not a list) are normalized to lists

Design Decisions:
    - App pages are walked with BeautifulSoup; regexes only read the url-encoded
      token and the JSON embedded in <script> blocks
"""

import re
from typing import Any

from bs4 import BeautifulSoup

_SIMILAR_SECTION = re.compile(
    r'customers-also-bought-apps.*?"data"\s*:\s*\[(.*?)\]', re.DOTALL,
)
_ITEM_ID = re.compile(r'"id"\s*:\s*"(\d+)"')
_TOKEN = re.compile(r"token%22%3A%22([^%]+)%22%7D")
_DEVELOPER_ID = re.compile(r"/id(\d+)")


def clean_app(app: dict[str, Any]) -> dict[str, Any]:
    """Lookup/search result -> app object."""
    return {
        "id": app.get("trackId"),
        "appId": app.get("bundleId"),
        "title": app.get("trackName"),
        "url": app.get("trackViewUrl"),
        "description": app.get("description"),
        "icon": (
            app.get("artworkUrl512") or app.get("artworkUrl100")
            or app.get("artworkUrl60")
        ),
        "genres": app.get("genres"),
        "genreIds": app.get("genreIds"),
        "primaryGenre": app.get("primaryGenreName"),
        "primaryGenreId": app.get("primaryGenreId"),
        "contentRating": app.get("contentAdvisoryRating"),
        "languages": app.get("languageCodesISO2A"),
        "size": app.get("fileSizeBytes"),
        "requiredOsVersion": app.get("minimumOsVersion"),
        "released": app.get("releaseDate"),
        "updated": app.get("currentVersionReleaseDate") or app.get("releaseDate"),
        "releaseNotes": app.get("releaseNotes"),
        "version": app.get("version"),
        "price": app.get("price"),
        "currency": app.get("currency"),
        "free": app.get("price") == 0,
        "developerId": app.get("artistId"),
        "developer": app.get("artistName"),
        "developerUrl": app.get("artistViewUrl"),
        "developerWebsite": app.get("sellerUrl"),
        "score": app.get("averageUserRating"),
        "reviews": app.get("userRatingCount"),
        "currentVersionScore": app.get("averageUserRatingForCurrentVersion"),
        "currentVersionReviews": app.get("userRatingCountForCurrentVersion"),
        "screenshots": app.get("screenshotUrls"),
        "ipadScreenshots": app.get("ipadScreenshotUrls"),
        "appletvScreenshots": app.get("appletvScreenshotUrls"),
        "supportedDevices": app.get("supportedDevices"),
    }


def software_results(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Keep only software entries of a lookup/search response, cleaned."""
    return [
        clean_app(item) for item in payload.get("results", [])
        if item.get("wrapperType", "software") == "software"
    ]


def feed_entries(payload: dict[str, Any]) -> list[dict[str, Any]]:
    entries = payload.get("feed", {}).get("entry", [])
    if isinstance(entries, dict):
        return [entries]
    return entries


def _label(entry: dict[str, Any], key: str) -> Any:
    return (entry.get(key) or {}).get("label")


def _attr(entry: dict[str, Any], key: str, name: str) -> Any:
    return ((entry.get(key) or {}).get("attributes") or {}).get(name)


def clean_list_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """RSS chart entry -> compact app object."""
    developer_url = _attr(entry, "im:artist", "href")
    developer_id = None
    if developer_url:
        match = _DEVELOPER_ID.search(developer_url)
        developer_id = match.group(1) if match else None
    amount = _attr(entry, "im:price", "amount")
    price = float(amount) if amount is not None else None
    images = entry.get("im:image") or []
    return {
        "id": _attr(entry, "id", "im:id"),
        "appId": _attr(entry, "id", "im:bundleId"),
        "title": _label(entry, "im:name"),
        "icon": images[-1].get("label") if images else None,
        "url": _attr(entry, "link", "href"),
        "price": price,
        "currency": _attr(entry, "im:price", "currency"),
        "free": price == 0,
        "description": _label(entry, "summary"),
        "developer": _label(entry, "im:artist"),
        "developerUrl": developer_url,
        "developerId": developer_id,
        "genre": _attr(entry, "category", "label"),
        "genreId": _attr(entry, "category", "im:id"),
        "released": _label(entry, "im:releaseDate"),
    }


def clean_review(entry: dict[str, Any]) -> dict[str, Any]:
    """Customer-reviews RSS entry -> review object."""
    author = entry.get("author") or {}
    rating = _label(entry, "im:rating")
    return {
        "id": _label(entry, "id"),
        "userName": _label(author, "name"),
        "userUrl": _label(author, "uri"),
        "version": _label(entry, "im:version"),
        "score": int(rating) if rating is not None else None,
        "title": _label(entry, "title"),
        "text": _label(entry, "content"),
        "url": _attr(entry, "link", "href"),
        "updated": _label(entry, "updated"),
    }


def extract_similar_ids(html: str) -> list[str]:
    """App ids listed under "customers also bought" on an app page."""
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        section = _SIMILAR_SECTION.search(script.string or "")
        if section:
            return _ITEM_ID.findall(section.group(1))
    return []


def extract_token(html: str) -> str | None:
    """Bearer token embedded (url-encoded) in an apps.apple.com page."""
    match = _TOKEN.search(html)
    return match.group(1) if match else None


def parse_histogram(html: str) -> dict[str, int]:
    """Star histogram (5..1 on the page) keyed "1".."5"."""
    soup = BeautifulSoup(html, "html.parser")
    labels = [
        span.get_text(strip=True).replace(",", "")
        for span in soup.find_all("span", class_="total")
    ]
    totals = [int(label) for label in labels if label.isdigit()]
    if len(totals) != 5:
        return {}
    return {str(5 - i): total for i, total in enumerate(totals)}
