"""Builds the ordered (service, city) work list for a run."""

import logging
from typing import List, Optional, Sequence

from fetcher.core.errors import ConfigurationError
from fetcher.core.models import Service, WorkItem

logger = logging.getLogger(__name__)


def select_services(
    services: Sequence[Service],
    *,
    service_limit: int = 0,
    service_filter: Optional[str] = None,
) -> List[Service]:
    selected = list(services[:service_limit]) if service_limit > 0 else list(services)
    if service_filter:
        wanted = service_filter.strip().lower()
        selected = [service for service in selected if service.key.lower() == wanted]
        if not selected:
            available = ", ".join(service.key for service in services)
            raise ConfigurationError(f'SERVICE_FILTER="{wanted}" did not match any services. Available keys: {available}')
    return selected


def enumerate_work_items(
    cities: Sequence[str],
    services: Sequence[Service],
    *,
    city_limit: int = 0,
    service_limit: int = 0,
    service_filter: Optional[str] = None,
) -> List[WorkItem]:
    """Return work items service-major: every city of one service before the next service.

    The service limit is applied before the key filter, so a filter naming a
    service beyond the limit fails like an unknown key.
    """
    selected_cities = list(cities[:city_limit]) if city_limit > 0 else list(cities)
    selected_services = select_services(services, service_limit=service_limit, service_filter=service_filter)

    items = [WorkItem(service=service, city=city) for service in selected_services for city in selected_cities]
    logger.debug(
        "Enumerated %d work items (%d services x %d cities)",
        len(items),
        len(selected_services),
        len(selected_cities),
    )
    return items
