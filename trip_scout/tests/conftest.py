import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from trip_scout.auth import TokenSession
from trip_scout.config import get_settings
from trip_scout.models import FlightOffer, HotelOffer

ENV_VARS = [
    "AMADEUS_ENV",
    "AMADEUS_CLIENT_ID",
    "AMADEUS_CLIENT_SECRET",
    "HF_MODEL",
    "HUGGINGFACE_API_KEY",
    "MARKETPLACE_TIMEOUT_S",
    "AI_TIMEOUT_S",
    "SETTLEMENT_CURRENCY",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env or shell credentials out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def json_response(payload, status_code=200):
    resp = Mock(status_code=status_code)
    resp.text = payload if isinstance(payload, str) else json.dumps(payload)
    resp.json.side_effect = lambda: json.loads(resp.text)
    return resp


@pytest.fixture
def respond():
    return json_response


@pytest.fixture
def stub_session():
    session = Mock(spec=TokenSession)
    session.configured = True
    session.acquire.return_value = "tok-123"
    return session


@pytest.fixture
def make_flight():
    def _make(price, airline="Test Air", stops=0, **extra):
        fields = dict(
            price=Decimal(str(price)),
            currency="USD",
            airline=airline,
            airline_code="TA",
            flight_number="TA100",
            departure_time="2025-06-01T06:00:00Z",
            arrival_time="2025-06-01T10:00:00Z",
            duration="4h",
            stops=stops,
        )
        fields.update(extra)
        return FlightOffer(**fields)

    return _make


@pytest.fixture
def make_hotel():
    def _make(price, name="Test Hotel", rating=4.0, **extra):
        extra.setdefault("location", "Center")
        return HotelOffer(name=name, price=Decimal(str(price)), rating=rating, **extra)

    return _make


def segment(dep, arr, dep_at, arr_at, carrier, number):
    return {
        "departure": {"iataCode": dep, "at": dep_at},
        "arrival": {"iataCode": arr, "at": arr_at},
        "carrierCode": carrier,
        "number": number,
    }


@pytest.fixture
def flight_offers_payload():
    return {
        "meta": {"count": 4},
        "data": [
            {
                "type": "flight-offer",
                "price": {"currency": "USD", "total": "612.40", "grandTotal": "612.40"},
                "validatingAirlineCodes": ["BA"],
                "itineraries": [
                    {
                        "duration": "PT9H35M",
                        "segments": [
                            segment("LHR", "DUB", "2025-06-01T07:00:00", "2025-06-01T08:25:00", "BA", "830"),
                            segment("DUB", "JFK", "2025-06-01T10:10:00", "2025-06-01T12:35:00", "EI", "105"),
                        ],
                    },
                    {
                        "duration": "PT7H",
                        "segments": [
                            segment("JFK", "LHR", "2025-06-08T18:00:00", "2025-06-09T06:00:00", "BA", "178"),
                        ],
                    },
                ],
            },
            {
                "type": "flight-offer",
                "price": {"currency": "USD", "grandTotal": "450.00"},
                "validatingAirlineCodes": ["UA"],
                "itineraries": [],
            },
            {
                "type": "flight-offer",
                "price": {"currency": "USD", "grandTotal": "0.00"},
                "itineraries": [{"duration": "PT8H", "segments": []}],
            },
            {
                "type": "flight-offer",
                "price": {"currency": "USD", "grandTotal": "389.99"},
                "validatingAirlineCodes": ["LH"],
                "itineraries": [{"duration": "PT45M", "segments": []}],
            },
        ],
    }


@pytest.fixture
def hotel_list_payload():
    return {"data": [{"hotelId": f"HL{i:04d}", "name": f"Hotel {i}"} for i in range(25)]}


@pytest.fixture
def hotel_offers_payload():
    return {
        "data": [
            {
                "available": True,
                "hotel": {
                    "hotelId": "HL0001",
                    "name": "Tower View",
                    "cityCode": "LON",
                    "rating": "4",
                    "address": {"cityName": "London"},
                },
                "offers": [{"price": {"currency": "GBP", "total": "210.50"}}],
            },
            {
                "available": False,
                "hotel": {"hotelId": "HL0002", "name": "Sold Out Inn", "cityCode": "LON"},
                "offers": [{"price": {"currency": "GBP", "total": "99.00"}}],
            },
            {
                "available": True,
                "hotel": {"hotelId": "HL0003", "name": "No Rooms Lodge", "cityCode": "LON"},
                "offers": [],
            },
            {
                "available": True,
                "hotel": {"hotelId": "HL0004", "name": "Broken Price", "cityCode": "LON"},
                "offers": [{"price": {"currency": "GBP", "total": "n/a"}}],
            },
            {
                "available": True,
                "hotel": {"hotelId": "HL0005", "name": "Plain Rooms", "cityCode": "LON", "rating": "9"},
                "offers": [{"price": {"total": "88"}}],
            },
            {
                "available": True,
                "hotel": {"hotelId": "HL0006", "name": "Unrated", "cityCode": "LON"},
                "offers": [{"price": {"currency": "GBP", "total": "120"}}],
            },
        ]
    }
