import json

import pytest

from fetcher.core import storage
from fetcher.core.models import Service, WorkItem

HVAC = Service(key="hvac", label="HVAC", query="hvac contractor", folder="hvac")


@pytest.mark.parametrize(
    "city, slug",
    [("Tampa", "tampa"), ("  Port St. Lucie ", "port-st-lucie"), ("St. Petersburg", "st-petersburg"), ("Miami  Gardens", "miami-gardens")],
)
def test_slugify_city(city, slug):
    assert storage.slugify_city(city) == slug


def test_output_path_uses_folder_then_key(tmp_path):
    assert storage.output_path(tmp_path, WorkItem(HVAC, "Tampa")) == tmp_path / "hvac" / "tampa.json"
    no_folder = Service(key="roofing", label="Roofing", query="roofer")
    assert storage.output_path(tmp_path, WorkItem(no_folder, "Ocala")) == tmp_path / "roofing" / "ocala.json"


def test_read_existing_count(tmp_path):
    good = tmp_path / "good.json"
    good.write_text(json.dumps([{}, {}, {}]), encoding="utf-8")
    not_list = tmp_path / "obj.json"
    not_list.write_text("{}", encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")

    assert storage.read_existing_count(good) == 3
    assert storage.read_existing_count(not_list) == 0
    assert storage.read_existing_count(broken) == -1
    assert storage.read_existing_count(tmp_path / "missing.json") == -1


def test_decide_missing_file_fetches(tmp_path):
    decision = storage.decide(tmp_path / "x.json", skip_existing=True, min_results=5)

    assert decision.fetch is True
    assert decision.reason == "missing"


def test_decide_existing_without_threshold_skips(tmp_path):
    path = tmp_path / "x.json"
    path.write_text("[]", encoding="utf-8")

    decision = storage.decide(path, skip_existing=True, min_results=0)

    assert decision.fetch is False
    assert decision.reason == "exists"


def test_decide_skip_existing_off_overwrites(tmp_path):
    path = tmp_path / "x.json"
    path.write_text("[{}]", encoding="utf-8")

    assert storage.decide(path, skip_existing=False).fetch is True


def test_decide_threshold(tmp_path):
    path = tmp_path / "x.json"
    path.write_text(json.dumps([{}, {}]), encoding="utf-8")

    assert storage.decide(path, skip_existing=True, min_results=2) == storage.GateDecision(False, "has 2")
    topup = storage.decide(path, skip_existing=True, min_results=3)
    assert topup.fetch is True
    assert topup.reason.startswith("below minimum")

    path.write_text("garbage", encoding="utf-8")
    assert storage.decide(path, skip_existing=True, min_results=3) == storage.GateDecision(True, "unreadable")


def test_write_listings_creates_dirs_and_replaces(tmp_path):
    path = tmp_path / "hvac" / "tampa.json"

    storage.write_listings(path, [{"name": "Old"}, {"name": "Older"}])
    storage.write_listings(path, [{"name": "Café Cool"}])

    assert json.loads(path.read_text(encoding="utf-8")) == [{"name": "Café Cool"}]
    assert "Café" in path.read_text(encoding="utf-8")
    assert [p.name for p in path.parent.iterdir()] == ["tampa.json"]


def test_write_listings_keeps_old_file_on_failure(tmp_path):
    path = tmp_path / "tampa.json"
    storage.write_listings(path, [{"name": "Old"}])

    with pytest.raises(TypeError):
        storage.write_listings(path, [{"name": object()}])

    assert json.loads(path.read_text(encoding="utf-8")) == [{"name": "Old"}]
    assert [p.name for p in tmp_path.iterdir()] == ["tampa.json"]
