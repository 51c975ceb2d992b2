from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import TypeAdapter

from travel_planner.domain.errors import AuthFailure, NotFound, UpstreamError, ValidationError, http_status_for
from travel_planner.domain.models import (
    Credential,
    FlightOffer,
    OneWayOffer,
    RoundTripOffer,
    TripType,
    UnifiedResult,
    match_result,
)

from conftest import offer_payload, segment


def test_credential_validity_is_strict():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    credential = Credential(token="t", expires_at=now + timedelta(seconds=10))

    assert credential.is_valid(now)
    assert not credential.is_valid(now + timedelta(seconds=10))


@pytest.mark.parametrize("value, expected", [
    ("one-way", TripType.ONE_WAY),
    ("oneway", TripType.ONE_WAY),
    ("round-trip", TripType.ROUND_TRIP),
    ("roundtrip", TripType.ROUND_TRIP),
    ("ROUND_TRIP", TripType.ROUND_TRIP),
])
def test_trip_type_accepts_legacy_spellings(value, expected):
    assert TripType(value) is expected


def test_offer_views():
    offer = FlightOffer.model_validate(
        offer_payload(segments=[segment("MAN", "LHR", number="1"), segment("LHR", "JFK", number="2")])
    )

    assert offer.origin == "MAN"
    assert offer.final_destination == "JFK"
    assert offer.total_stops == 1
    assert offer.route_summary == "MAN → LHR → JFK"
    assert offer.price.amount == Decimal("450.00")
    assert str(offer.price) == "USD 450.00"
    assert offer.segments[1].flight_code == "BA2"


def test_unified_results_round_trip_through_json():
    offer = FlightOffer.model_validate(offer_payload())
    adapter = TypeAdapter(list[UnifiedResult])
    results = [OneWayOffer(offer=offer), RoundTripOffer(outbound=offer, return_=None)]

    dumped = adapter.dump_python(results, by_alias=True, mode="json")
    assert dumped[0]["kind"] == "one-way-offer"
    assert dumped[1]["kind"] == "roundtrip-offer"
    assert "return" in dumped[1] and dumped[1]["return"] is None

    loaded = adapter.validate_python(dumped)
    assert isinstance(loaded[0], OneWayOffer)
    assert isinstance(loaded[1], RoundTripOffer)


def test_match_result_is_exhaustive():
    offer = FlightOffer.model_validate(offer_payload())

    assert match_result(OneWayOffer(offer=offer), lambda r: "one", lambda r: "round") == "one"
    assert match_result(RoundTripOffer(outbound=offer, return_=None), lambda r: "one", lambda r: "round") == "round"
    with pytest.raises(TypeError):
        match_result(offer, lambda r: "one", lambda r: "round")


def test_error_payloads_and_statuses():
    assert http_status_for(ValidationError("origin", "is required")) == 400
    assert http_status_for(NotFound("flight-offers")) == 404
    assert http_status_for(AuthFailure("nope")) == 500
    assert http_status_for(UpstreamError("flight-offers", "boom", status=502)) == 500
    assert http_status_for(RuntimeError()) == 500

    payload = ValidationError("origin", "is required").to_payload()
    assert payload == {"error": "validation_error", "message": "Invalid 'origin': is required", "field": "origin"}
    assert NotFound("flight-destinations").to_payload()["operation"] == "flight-destinations"
