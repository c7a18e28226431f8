"""Utilities for turning Google Places responses into directory listings."""

import logging
import math
from typing import Any, Dict, Iterable, List

from fetcher.core.models import NormalizedListing

logger = logging.getLogger(__name__)

# Some candidates drop out during details filtering, so more ids than the limit are looked up.
OVERFETCH_MARGIN = 25


def dedupe_place_ids(results: Iterable[Dict[str, Any]], limit: int) -> List[str]:
    """Unique place ids in first-seen order, truncated to ``max(limit, OVERFETCH_MARGIN)``."""
    seen = set()
    place_ids: List[str] = []
    for result in results:
        place_id = (result or {}).get("place_id")
        if not place_id:
            logger.debug("Skipping result without place_id: %s", result)
            continue
        if place_id in seen:
            continue
        seen.add(place_id)
        place_ids.append(place_id)
    return place_ids[: max(limit, OVERFETCH_MARGIN)]


def is_operational(details: Dict[str, Any]) -> bool:
    status = details.get("business_status")
    return not status or status == "OPERATIONAL"


def to_listing(details: Dict[str, Any], place_id: str) -> NormalizedListing:
    return NormalizedListing(
        name=_str_or_empty(details.get("name")),
        rating=_safe_float(details.get("rating")),
        reviews=_safe_int(details.get("user_ratings_total")),
        phone=_str_or_empty(details.get("formatted_phone_number")),
        website=_str_or_empty(details.get("website")),
        address=_str_or_empty(details.get("formatted_address")),
        place_id=place_id,
        maps_url=_str_or_empty(details.get("url")),
    )


def _str_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _safe_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _safe_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)
