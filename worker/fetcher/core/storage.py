"""Output artifact paths, the skip/top-up gate, and atomic JSON writes."""

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fetcher.core.models import WorkItem

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class GateDecision:
    fetch: bool
    reason: str


def slugify_city(city: str) -> str:
    slug = re.sub(r"\s+", "-", city.lower().strip())
    return re.sub(r"[^a-z0-9-]", "", slug)


def output_path(output_dir: PathLike, item: WorkItem) -> Path:
    return Path(output_dir) / item.service.output_folder / f"{slugify_city(item.city)}.json"


def read_existing_count(path: PathLike) -> int:
    """Count entries in an existing artifact; -1 when it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read existing file %s: %s", path, exc)
        return -1
    return len(data) if isinstance(data, list) else 0


def decide(path: PathLike, *, skip_existing: bool, min_results: int = 0) -> GateDecision:
    path = Path(path)
    if not path.exists():
        return GateDecision(fetch=True, reason="missing")
    if not skip_existing:
        return GateDecision(fetch=True, reason="overwrite")
    if min_results <= 0:
        return GateDecision(fetch=False, reason="exists")

    count = read_existing_count(path)
    if count < 0:
        return GateDecision(fetch=True, reason="unreadable")
    if count >= min_results:
        return GateDecision(fetch=False, reason=f"has {count}")
    return GateDecision(fetch=True, reason=f"below minimum ({count} < {min_results})")


def write_listings(path: PathLike, listings: List[Dict[str, Any]]) -> Path:
    """Replace ``path`` with ``listings`` as a JSON array; the old file survives any failure."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=path.parent)
    tmp_path: Optional[Path] = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(listings, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
    logger.debug("Wrote %d listings to %s", len(listings), path)
    return path
