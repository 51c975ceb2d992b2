import asyncio
from collections import Counter
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from travel_planner.infrastructure.config import Config

TOKEN_PATH = "/v1/security/oauth2/token"
OFFERS_PATH = "/v2/shopping/flight-offers"
DESTINATIONS_PATH = "/v1/shopping/flight-destinations"
LOCATIONS_PATH = "/v1/reference-data/locations"


class FakeClock:
    def __init__(self, start=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def segment(origin, destination, at="2025-06-01T10:00:00", carrier="BA", number="117"):
    return {
        "departure": {"iataCode": origin, "at": at},
        "arrival": {"iataCode": destination, "at": at.replace("10:00", "13:00")},
        "carrierCode": carrier,
        "number": number,
    }


def offer_payload(offer_id="1", origin="LHR", destination="JFK", total="450.00", currency="USD", segments=None):
    return {
        "type": "flight-offer",
        "id": offer_id,
        "source": "GDS",
        "oneWay": False,
        "lastTicketingDate": "2025-05-30",
        "numberOfBookableSeats": 9,
        "itineraries": [
            {
                "duration": "PT8H",
                "segments": segments if segments is not None else [segment(origin, destination)],
            }
        ],
        "price": {"currency": currency, "total": total, "grandTotal": total},
        "validatingAirlineCodes": ["BA"],
    }


def destination_payload(origin="JFK", destination="LHR", departure_date="2025-06-10", total="120.00"):
    return {
        "type": "flight-destination",
        "origin": origin,
        "destination": destination,
        "departureDate": departure_date,
        "returnDate": None,
        "price": {"total": total},
        "links": {"flightDates": "", "flightOffers": ""},
    }


class AmadeusStub:
    """Simula os endpoints da Amadeus e conta chamadas por caminho"""

    def __init__(self, offers=None, destinations=None, locations=None, expires_in=1799, token_delay=0.0):
        self.calls = Counter()
        self.requests = []
        self.offers = offers if offers is not None else [offer_payload()]
        self.destinations = destinations if destinations is not None else []
        self.locations = locations if locations is not None else []
        self.expires_in = expires_in
        self.token_delay = token_delay
        self.overrides = {}

    def respond(self, path, response):
        """Força uma resposta (ou exceção) para um caminho"""
        self.overrides[path] = response

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path] += 1
        self.requests.append(request)

        if path in self.overrides:
            override = self.overrides[path]
            if isinstance(override, Exception):
                raise override
            return override

        if path == TOKEN_PATH:
            if self.token_delay:
                await asyncio.sleep(self.token_delay)
            token_number = self.calls[TOKEN_PATH]
            return httpx.Response(
                200,
                json={
                    "type": "amadeusOAuth2Token",
                    "access_token": f"token-{token_number}",
                    "expires_in": self.expires_in,
                },
            )
        if path == OFFERS_PATH:
            return httpx.Response(200, json={"meta": {"count": len(self.offers)}, "data": self.offers})
        if path == DESTINATIONS_PATH:
            return httpx.Response(200, json={"data": self.destinations})
        if path == LOCATIONS_PATH:
            return httpx.Response(200, json={"data": self.locations})
        return httpx.Response(404, json={"errors": [{"status": 404}]})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def config():
    return Config(
        AMADEUS_CLIENT_ID="client-id", AMADEUS_CLIENT_SECRET="client-secret", AMADEUS_ENV="TEST", REQUEST_TIMEOUT=30
    )


@pytest.fixture
def stub():
    return AmadeusStub()


@pytest.fixture
def clock():
    return FakeClock()
