from fetcher.etl import transform


def test_dedupe_place_ids_keeps_first_seen_order():
    results = [
        {"place_id": "B"},
        {"place_id": "A"},
        {"place_id": "B"},
        {"name": "no id"},
        {"place_id": "C"},
        {"place_id": "A"},
    ]

    assert transform.dedupe_place_ids(results, limit=10) == ["B", "A", "C"]


def test_dedupe_place_ids_overfetches_past_small_limits():
    results = [{"place_id": str(i)} for i in range(40)]

    assert len(transform.dedupe_place_ids(results, limit=2)) == transform.OVERFETCH_MARGIN
    assert len(transform.dedupe_place_ids(results, limit=30)) == 30


def test_is_operational():
    assert transform.is_operational({"business_status": "OPERATIONAL"})
    assert transform.is_operational({})
    assert not transform.is_operational({"business_status": "CLOSED_PERMANENTLY"})
    assert not transform.is_operational({"business_status": "CLOSED_TEMPORARILY"})


def test_to_listing_is_fully_keyed():
    listing = transform.to_listing({"name": "Acme Air"}, "A")

    assert listing.to_dict() == {
        "name": "Acme Air",
        "rating": 0.0,
        "reviews": 0,
        "phone": "",
        "website": "",
        "address": "",
        "place_id": "A",
        "maps_url": "",
    }


def test_to_listing_maps_details_fields():
    details = {
        "name": "Acme Air ",
        "rating": "4.6",
        "user_ratings_total": 128,
        "formatted_phone_number": "(813) 555-0100",
        "website": "https://acme.example",
        "formatted_address": "1 Main St, Tampa, FL",
        "url": "https://maps.google.com/?cid=1",
    }

    listing = transform.to_listing(details, "A")

    assert listing.name == "Acme Air"
    assert listing.rating == 4.6
    assert listing.reviews == 128
    assert listing.phone == "(813) 555-0100"
    assert listing.address == "1 Main St, Tampa, FL"
    assert listing.maps_url == "https://maps.google.com/?cid=1"


def test_to_listing_clamps_bad_numbers():
    listing = transform.to_listing({"rating": "n/a", "user_ratings_total": -4}, "A")

    assert listing.rating == 0.0
    assert listing.reviews == 0
