"""Static catalogs of the services and Florida cities the directory covers."""

from typing import Optional, Tuple

from fetcher.core.models import Service

SERVICES: Tuple[Service, ...] = (
    Service(key="hvac", label="HVAC", query="hvac contractor", folder="hvac"),
    Service(key="plumbing", label="Plumbing", query="plumber", folder="plumbing"),
    Service(key="electrical", label="Electrical", query="electrician", folder="electrical"),
    Service(key="roofing", label="Roofing", query="roofing contractor", folder="roofing"),
    Service(key="pest-control", label="Pest Control", query="pest control", folder="pest-control"),
    Service(key="handyman", label="Handyman", query="handyman", folder="handyman"),
)

DEFAULT_SERVICE_KEY = "hvac"

# Ordered roughly by population; CITY_LIMIT takes a prefix of this list.
FLORIDA_CITIES: Tuple[str, ...] = (
    "Jacksonville",
    "Miami",
    "Tampa",
    "Orlando",
    "St. Petersburg",
    "Hialeah",
    "Port St. Lucie",
    "Cape Coral",
    "Tallahassee",
    "Fort Lauderdale",
    "Pembroke Pines",
    "Hollywood",
    "Gainesville",
    "Miramar",
    "Coral Springs",
    "Palm Bay",
    "West Palm Beach",
    "Clearwater",
    "Lakeland",
    "Pompano Beach",
    "Miami Gardens",
    "Davie",
    "Boca Raton",
    "Sunrise",
    "Plantation",
    "Deltona",
    "Palm Coast",
    "Fort Myers",
    "Deerfield Beach",
    "Largo",
    "Melbourne",
    "Boynton Beach",
    "Lauderhill",
    "Weston",
    "Kissimmee",
    "Homestead",
    "Delray Beach",
    "Daytona Beach",
    "Tamarac",
    "North Miami",
    "Wellington",
    "Jupiter",
    "Port Orange",
    "Ocala",
    "Sanford",
    "Palm Beach Gardens",
    "Sarasota",
    "Pensacola",
    "Bradenton",
    "Coconut Creek",
    "Margate",
    "Pinellas Park",
    "Doral",
    "Bonita Springs",
    "Apopka",
    "Titusville",
    "North Port",
    "Oakland Park",
    "Fort Pierce",
    "Winter Garden",
    "Naples",
    "Panama City",
    "Winter Haven",
    "Venice",
    "Punta Gorda",
)


def get_service_by_key(key: str) -> Optional[Service]:
    wanted = (key or "").strip().lower()
    for service in SERVICES:
        if service.key.lower() == wanted:
            return service
    return None
