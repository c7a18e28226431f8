"""Client utilities for the Google Places API.

Two API generations are supported. The classic web service reports failures in a
``status`` field of an HTTP 200 body; Places API (New) uses HTTP status codes and
an ``error`` object. Both are decoded here, once, into a :class:`PlacesResponse`
whose ``outcome`` is all the rest of the worker looks at. Details results are
reshaped into the classic field names whichever generation produced them.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from fetcher.core.errors import ProviderFatalError, ProviderTransientError

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_MODERN_BASE_URL = "https://places.googleapis.com/v1"

DETAILS_FIELDS = (
    "name",
    "rating",
    "user_ratings_total",
    "formatted_phone_number",
    "website",
    "formatted_address",
    "url",
    "business_status",
)
MODERN_DETAILS_FIELDS = (
    "id",
    "displayName",
    "rating",
    "userRatingCount",
    "nationalPhoneNumber",
    "websiteUri",
    "formattedAddress",
    "googleMapsUri",
    "businessStatus",
)
MODERN_SEARCH_FIELDS = tuple(f"places.{name}" for name in MODERN_DETAILS_FIELDS) + ("nextPageToken",)

SOFT_STATUSES = {"OVER_QUERY_LIMIT", "REQUEST_DENIED", "UNKNOWN_ERROR"}
SOFT_HTTP_CODES = {401, 403, 408, 429}


class Outcome(str, Enum):
    OK = "OK"
    ZERO_RESULTS = "ZERO_RESULTS"
    SOFT_ERROR = "SOFT_ERROR"
    HARD_ERROR = "HARD_ERROR"


@dataclass(frozen=True)
class PlacesResponse:
    outcome: Outcome
    results: List[Dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None
    result: Dict[str, Any] = field(default_factory=dict)
    code: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    def raise_for_outcome(self) -> None:
        """Raise the matching provider error for failed outcomes, like ``Response.raise_for_status``."""
        if self.outcome is Outcome.SOFT_ERROR:
            raise ProviderTransientError(self.message or self.code, code=self.code)
        if self.outcome is Outcome.HARD_ERROR:
            raise ProviderFatalError(self.message or self.code, code=self.code)


def classify_classic(payload: Dict[str, Any]) -> PlacesResponse:
    """Decode a classic web-service body by its ``status`` field."""
    status = payload.get("status") or ""
    message = payload.get("error_message") or ""
    if status == "OK":
        return PlacesResponse(
            outcome=Outcome.OK,
            results=list(payload.get("results") or []),
            next_page_token=payload.get("next_page_token") or None,
            result=dict(payload.get("result") or {}),
            code=status,
        )
    if status == "ZERO_RESULTS":
        return PlacesResponse(outcome=Outcome.ZERO_RESULTS, code=status)
    if status in SOFT_STATUSES:
        return PlacesResponse(outcome=Outcome.SOFT_ERROR, code=status, message=message)
    return PlacesResponse(outcome=Outcome.HARD_ERROR, code=status or "NO_RESPONSE", message=message)


def classify_modern(status_code: int, payload: Dict[str, Any]) -> Optional[PlacesResponse]:
    """Decode a Places API (New) failure by HTTP status; ``None`` means the call succeeded."""
    if 200 <= status_code < 300:
        return None
    error = payload.get("error") or {}
    code = error.get("status") or str(status_code)
    message = error.get("message") or ""
    if status_code in SOFT_HTTP_CODES or status_code >= 500:
        return PlacesResponse(outcome=Outcome.SOFT_ERROR, code=code, message=message)
    return PlacesResponse(outcome=Outcome.HARD_ERROR, code=code, message=message)


def _modern_place_to_classic(place: Dict[str, Any]) -> Dict[str, Any]:
    display_name = place.get("displayName") or {}
    return {
        "place_id": place.get("id"),
        "name": display_name.get("text") if isinstance(display_name, dict) else display_name,
        "rating": place.get("rating"),
        "user_ratings_total": place.get("userRatingCount"),
        "formatted_phone_number": place.get("nationalPhoneNumber"),
        "website": place.get("websiteUri"),
        "formatted_address": place.get("formattedAddress"),
        "url": place.get("googleMapsUri"),
        "business_status": place.get("businessStatus"),
    }


def _json_body(response: requests.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        logger.warning("Places API returned a non-JSON body (HTTP %s)", response.status_code)
        raise
    return payload if isinstance(payload, dict) else {}


def text_search(
    query: str,
    api_key: str,
    pagetoken: Optional[str] = None,
    *,
    api_version: str = "classic",
    timeout: float = 10,
) -> PlacesResponse:
    if api_version == "modern":
        return _modern_text_search(query, api_key, pagetoken, timeout)

    params = {"query": query, "key": api_key}
    if pagetoken:
        params["pagetoken"] = pagetoken
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=timeout)
    response.raise_for_status()
    decoded = classify_classic(_json_body(response))
    if decoded.outcome not in {Outcome.OK, Outcome.ZERO_RESULTS}:
        logger.error("text_search failed: status=%s, error_message=%s", decoded.code, decoded.message)
    return decoded


def _modern_text_search(query: str, api_key: str, pagetoken: Optional[str], timeout: float) -> PlacesResponse:
    body: Dict[str, Any] = {"textQuery": query}
    if pagetoken:
        body["pageToken"] = pagetoken
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": ",".join(MODERN_SEARCH_FIELDS),
    }
    response = _SESSION.post(f"{_MODERN_BASE_URL}/places:searchText", json=body, headers=headers, timeout=timeout)
    payload = _json_body(response)
    failure = classify_modern(response.status_code, payload)
    if failure is not None:
        logger.error("text_search failed: status=%s, error_message=%s", failure.code, failure.message)
        return failure

    places = payload.get("places") or []
    if not places:
        return PlacesResponse(outcome=Outcome.ZERO_RESULTS, code="ZERO_RESULTS")
    return PlacesResponse(
        outcome=Outcome.OK,
        results=[_modern_place_to_classic(place) for place in places],
        next_page_token=payload.get("nextPageToken") or None,
        code="OK",
    )


def place_details(
    place_id: str,
    api_key: str,
    *,
    api_version: str = "classic",
    timeout: float = 10,
) -> PlacesResponse:
    if api_version == "modern":
        return _modern_place_details(place_id, api_key, timeout)

    params = {"place_id": place_id, "key": api_key, "fields": ",".join(DETAILS_FIELDS)}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=timeout)
    response.raise_for_status()
    decoded = classify_classic(_json_body(response))
    if not decoded.ok:
        logger.error("place_details failed: status=%s, error_message=%s", decoded.code, decoded.message)
    return decoded


def _modern_place_details(place_id: str, api_key: str, timeout: float) -> PlacesResponse:
    headers = {
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": ",".join(MODERN_DETAILS_FIELDS),
    }
    response = _SESSION.get(f"{_MODERN_BASE_URL}/places/{place_id}", headers=headers, timeout=timeout)
    payload = _json_body(response)
    failure = classify_modern(response.status_code, payload)
    if failure is not None:
        logger.error("place_details failed: status=%s, error_message=%s", failure.code, failure.message)
        return failure
    return PlacesResponse(outcome=Outcome.OK, result=_modern_place_to_classic(payload), code="OK")
