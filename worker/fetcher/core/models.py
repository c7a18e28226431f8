"""Core data models shared by the listings fetch pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class Service:
    """A home-services category the directory lists, e.g. HVAC or plumbing."""

    key: str
    label: str
    query: str
    folder: str = ""

    @property
    def output_folder(self) -> str:
        return self.folder or self.key


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One (service, city) unit of fetch work."""

    service: Service
    city: str


@dataclass(slots=True)
class NormalizedListing:
    """Fully keyed listing record persisted to the site's JSON data files."""

    name: str = ""
    rating: float = 0.0
    reviews: int = 0
    phone: str = ""
    website: str = ""
    address: str = ""
    place_id: str = ""
    maps_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ItemResult:
    status: str
    city_slug: str
    out_file: str
    count: int = 0
    reason: Optional[str] = None
    error: Optional[str] = None


@dataclass(slots=True)
class RunSummary:
    ok: int = 0
    skipped: int = 0
    errored: int = 0
    elapsed_seconds: float = 0.0
    results: list = field(default_factory=list, repr=False)

    def record(self, result: ItemResult) -> None:
        if result.status == "ok":
            self.ok += 1
        elif result.status == "skipped":
            self.skipped += 1
        else:
            self.errored += 1
        self.results.append(result)
