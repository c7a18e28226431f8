"""Batch job that fetches Google Places listings for every (service, city) pair.

Each work item is resolved fully (search pages, then one details call per
candidate) before the next begins, and every provider call is preceded by a fixed
sleep so the run stays inside the API's request rate.
"""

import logging
import time
from typing import List, Optional, Sequence

from fetcher.core.catalog import FLORIDA_CITIES, SERVICES
from fetcher.core.config import Settings, get_settings
from fetcher.core.enumerator import enumerate_work_items
from fetcher.core.errors import ConfigurationError, ProviderFatalError
from fetcher.core.models import ItemResult, NormalizedListing, RunSummary, Service, WorkItem
from fetcher.core.retry import call_with_retry
from fetcher.core.storage import decide, output_path, slugify_city, write_listings
from fetcher.etl.transform import dedupe_place_ids, is_operational, to_listing
from fetcher.vendors import google_places

logger = logging.getLogger(__name__)

# A next_page_token is rejected until a short while after it is issued.
PAGE_TOKEN_DELAY_SECONDS = 2.0


def build_query(service: Service, city: str) -> str:
    return f"{service.query} in {city}, FL"


def search_places(query: str, settings: Settings, label: str) -> List[dict]:
    """Collect raw text-search results across up to ``settings.max_pages`` pages."""
    raw_results: List[dict] = []
    page_token: Optional[str] = None

    for page in range(settings.max_pages):
        time.sleep(PAGE_TOKEN_DELAY_SECONDS if page > 0 else settings.sleep_ms / 1000)

        response = call_with_retry(
            lambda: google_places.text_search(
                query=query,
                api_key=settings.google_api_key,
                pagetoken=page_token,
                api_version=settings.api_version,
                timeout=settings.request_timeout,
            ),
            label=f"TextSearch {label} page {page + 1}",
            retries=settings.retries,
            retry_delay_ms=settings.retry_delay_ms,
        )
        raw_results.extend(response.results)
        logger.debug("Fetched %d results on page %d for %s", len(response.results), page + 1, label)

        page_token = response.next_page_token
        if not page_token:
            break

    return raw_results


def fetch_listings(item: WorkItem, settings: Settings) -> List[NormalizedListing]:
    """Resolve one work item into at most ``limit_per_city`` operational listings.

    A search that cannot be completed raises :class:`ProviderFatalError`; a
    details lookup that fails only drops that one candidate.
    """
    label = f"{item.service.key}/{slugify_city(item.city)}"
    raw_results = search_places(build_query(item.service, item.city), settings, label)
    place_ids = dedupe_place_ids(raw_results, settings.limit_per_city)

    listings: List[NormalizedListing] = []
    for place_id in place_ids:
        time.sleep(settings.details_sleep_ms / 1000)

        try:
            details = call_with_retry(
                lambda: google_places.place_details(
                    place_id=place_id,
                    api_key=settings.google_api_key,
                    api_version=settings.api_version,
                    timeout=settings.request_timeout,
                ),
                label=f"Details {label}",
                retries=settings.retries,
                retry_delay_ms=settings.retry_delay_ms,
            )
        except ProviderFatalError as exc:
            logger.warning("Skipping %s for %s: %s", place_id, label, exc)
            continue

        if not details.ok:
            logger.debug("Skipping %s: details status %s", place_id, details.code)
            continue
        if not is_operational(details.result):
            logger.debug("Skipping %s: business_status=%s", place_id, details.result.get("business_status"))
            continue

        listings.append(to_listing(details.result, place_id))
        if len(listings) >= settings.limit_per_city:
            break

    return listings


def process_work_item(item: WorkItem, settings: Settings) -> ItemResult:
    city_slug = slugify_city(item.city)
    out_file = output_path(settings.output_dir, item)

    decision = decide(out_file, skip_existing=settings.skip_existing, min_results=settings.min_results)
    if not decision.fetch:
        return ItemResult(status="skipped", city_slug=city_slug, out_file=str(out_file), reason=decision.reason)

    logger.debug("Fetching %s/%s (%s)", item.service.key, city_slug, decision.reason)
    try:
        listings = fetch_listings(item, settings)
    except ProviderFatalError as exc:
        return ItemResult(status="error", city_slug=city_slug, out_file=str(out_file), error=exc.code or str(exc))

    write_listings(out_file, [listing.to_dict() for listing in listings])
    return ItemResult(status="ok", city_slug=city_slug, out_file=str(out_file), count=len(listings))


def run(
    settings: Settings,
    cities: Sequence[str] = FLORIDA_CITIES,
    services: Sequence[Service] = SERVICES,
) -> RunSummary:
    items = enumerate_work_items(
        cities,
        services,
        city_limit=settings.city_limit,
        service_limit=settings.service_limit,
        service_filter=settings.service_filter,
    )
    _log_banner(settings, items)

    summary = RunSummary()
    start = time.monotonic()
    current_service = None

    for item in items:
        if item.service.key != current_service:
            current_service = item.service.key
            logger.info("==== SERVICE: %s (%s) ====", item.service.key, item.service.output_folder)

        try:
            result = process_work_item(item, settings)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure for %s/%s", item.service.key, item.city)
            result = ItemResult(
                status="error",
                city_slug=slugify_city(item.city),
                out_file=str(output_path(settings.output_dir, item)),
                error=str(exc),
            )

        summary.record(result)
        _log_result(item, result)

    summary.elapsed_seconds = time.monotonic() - start
    logger.info(
        "DONE ok=%d skipped=%d errors=%d elapsed=%ds",
        summary.ok,
        summary.skipped,
        summary.errored,
        round(summary.elapsed_seconds),
    )
    return summary


def _log_banner(settings: Settings, items: Sequence[WorkItem]) -> None:
    services = {item.service.key for item in items}
    cities = {item.city for item in items}
    logger.info("Google Places listings fetch")
    logger.info("Cities: %d%s", len(cities), " (limited)" if settings.city_limit else "")
    logger.info("Services: %d%s", len(services), " (limited)" if settings.service_limit else "")
    logger.info("Service filter: %s", settings.service_filter or "(none)")
    logger.info("Limit per city: %d", settings.limit_per_city)
    logger.info("Skip existing: %s", settings.skip_existing)
    logger.info("Min results: %s", settings.min_results or "(off)")
    logger.info("Max pages: %d, retries: %d, API: %s", settings.max_pages, settings.retries, settings.api_version)
    logger.info("Output dir: %s", settings.output_dir)


def _log_result(item: WorkItem, result: ItemResult) -> None:
    name = f"{item.service.key} / {result.city_slug}"
    if result.status == "ok":
        logger.info("ok %s -> %d saved", name, result.count)
    elif result.status == "skipped":
        logger.info("skipped %s -> %s", name, result.reason)
    else:
        logger.error("error %s -> %s", name, result.error)


def main() -> None:
    try:
        settings = get_settings()
        logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
        run(settings)
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # pragma: no cover - CLI fallback
        logger.error("Listings fetch failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
