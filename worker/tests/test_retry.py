import pytest
import requests

from fetcher.core import retry
from fetcher.core.errors import ProviderFatalError
from fetcher.vendors.google_places import Outcome, PlacesResponse


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(retry.time, "sleep", recorded.append)
    return recorded


def sequence(*outcomes):
    calls = []
    items = list(outcomes)

    def call():
        calls.append(1)
        item = items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    call.calls = calls
    return call


def test_returns_first_success_without_sleeping(sleeps):
    ok = PlacesResponse(outcome=Outcome.OK, results=[{"place_id": "A"}])
    call = sequence(ok)

    assert retry.call_with_retry(call, label="search", retries=3, retry_delay_ms=1500) is ok
    assert len(call.calls) == 1
    assert sleeps == []


def test_zero_results_is_not_retried(sleeps):
    call = sequence(PlacesResponse(outcome=Outcome.ZERO_RESULTS))

    response = retry.call_with_retry(call, label="search", retries=3, retry_delay_ms=1500)

    assert response.outcome is Outcome.ZERO_RESULTS
    assert len(call.calls) == 1


def test_soft_error_then_success_backs_off_linearly(sleeps):
    call = sequence(
        PlacesResponse(outcome=Outcome.SOFT_ERROR, code="OVER_QUERY_LIMIT"),
        requests.ConnectionError("reset"),
        PlacesResponse(outcome=Outcome.OK),
    )

    response = retry.call_with_retry(call, label="search", retries=3, retry_delay_ms=1500)

    assert response.ok
    assert len(call.calls) == 3
    assert sleeps == [1.5, 3.0]


def test_exhausted_budget_raises_with_last_code(sleeps):
    soft = PlacesResponse(outcome=Outcome.SOFT_ERROR, code="OVER_QUERY_LIMIT", message="quota")
    call = sequence(soft, soft, soft)

    with pytest.raises(ProviderFatalError) as excinfo:
        retry.call_with_retry(call, label="search", retries=3, retry_delay_ms=100)

    assert len(call.calls) == 3
    assert excinfo.value.code == "OVER_QUERY_LIMIT"
    assert sleeps == [0.1, 0.2]


def test_exhausted_on_transport_errors(sleeps):
    call = sequence(requests.Timeout("slow"), requests.Timeout("slow"))

    with pytest.raises(ProviderFatalError) as excinfo:
        retry.call_with_retry(call, label="details", retries=2, retry_delay_ms=100)

    assert excinfo.value.code == "Timeout"
    assert isinstance(excinfo.value.__cause__, requests.Timeout)


def test_hard_error_is_not_retried(sleeps):
    call = sequence(PlacesResponse(outcome=Outcome.HARD_ERROR, code="INVALID_REQUEST"))

    with pytest.raises(ProviderFatalError) as excinfo:
        retry.call_with_retry(call, label="search", retries=3, retry_delay_ms=100)

    assert len(call.calls) == 1
    assert excinfo.value.code == "INVALID_REQUEST"
    assert sleeps == []
