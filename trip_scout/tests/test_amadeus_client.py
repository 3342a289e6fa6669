from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
import requests

from trip_scout.amadeus_client import AmadeusClient
from trip_scout.config import Settings
from trip_scout.errors import NoInventoryError, ParseError, ProviderError

BASE = "https://test.api.amadeus.com"
DEP = date(2025, 6, 1)
RET = date(2025, 6, 8)


@pytest.fixture
def client(stub_session):
    return AmadeusClient(stub_session, BASE, timeout=20.0)


@patch("requests.get")
def test_search_flights_request(mock_get, client, respond, stub_session):
    mock_get.return_value = respond({"data": []})

    assert client.search_flights("LHR", "JFK", DEP, RET, 2) == []

    stub_session.acquire.assert_called_once()
    args, kwargs = mock_get.call_args
    assert args[0] == f"{BASE}/v2/shopping/flight-offers"
    assert kwargs["params"] == {
        "originLocationCode": "LHR",
        "destinationLocationCode": "JFK",
        "departureDate": "2025-06-01",
        "returnDate": "2025-06-08",
        "adults": 2,
        "max": 6,
        "currencyCode": "USD",
    }
    assert kwargs["headers"]["Authorization"] == "Bearer tok-123"
    assert kwargs["timeout"] == 20.0


@patch("requests.get")
def test_search_flights_parsing(mock_get, client, respond, flight_offers_payload):
    mock_get.return_value = respond(flight_offers_payload)

    flights = client.search_flights("LHR", "JFK", DEP, RET, 1)

    # zero-itinerary and zero-price offers are dropped
    assert len(flights) == 2
    rt, ow = flights

    assert rt.price == Decimal("612.40")
    assert rt.currency == "USD"
    assert rt.airline_code == "BA"
    assert rt.airline == "British Airways"
    assert rt.flight_number == "BA830"
    assert rt.stops == 1
    assert rt.duration == "9h 35m"
    assert rt.departure_time == "2025-06-01T07:00:00"
    assert rt.arrival_time == "2025-06-01T12:35:00"
    assert rt.return_departure_time == "2025-06-08T18:00:00"
    assert rt.return_arrival_time == "2025-06-09T06:00:00"
    assert rt.return_duration == "7h"
    assert rt.return_stops == 0
    assert "LHR.JFK.2025-06-01" in rt.booking_link

    assert ow.airline_code == "LH"
    assert ow.airline == "Lufthansa"
    assert ow.flight_number == ""
    assert ow.stops == 0
    assert ow.duration == "45m"
    assert ow.return_duration is None
    assert ow.return_departure_time is None
    assert not ow.has_return


@patch("requests.get")
def test_search_flights_one_way_omits_return_date(mock_get, client, respond):
    mock_get.return_value = respond({"data": []})
    client.search_flights("LHR", "JFK", DEP, None, 1)
    assert "returnDate" not in mock_get.call_args.kwargs["params"]


@patch("requests.get")
def test_non_2xx_raises_provider_error(mock_get, client, respond):
    mock_get.return_value = respond('{"errors":[{"code":38189}]}', status_code=500)

    with pytest.raises(ProviderError) as info:
        client.search_flights("LHR", "JFK", DEP, RET, 1)
    assert info.value.status == 500
    assert "38189" in info.value.body


@patch("requests.get")
def test_timeout_raises_provider_error(mock_get, client):
    mock_get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(ProviderError) as info:
        client.search_flights("LHR", "JFK", DEP, RET, 1)
    assert info.value.status is None


@pytest.mark.parametrize(
    "body",
    ["not json", '{"data": {"unexpected": true}}', '{"data": [{"itineraries": "nope"}]}', "[]"],
)
@patch("requests.get")
def test_schema_mismatch_raises_parse_error(mock_get, body, client, respond):
    mock_get.return_value = respond(body)

    with pytest.raises(ParseError):
        client.search_flights("LHR", "JFK", DEP, RET, 1)


@patch("requests.get")
def test_search_hotels_two_stage(mock_get, client, respond, hotel_list_payload, hotel_offers_payload):
    mock_get.side_effect = [respond(hotel_list_payload), respond(hotel_offers_payload)]

    hotels = client.search_hotels("LHR", DEP, RET, 2)

    assert mock_get.call_count == 2
    list_call, offers_call = mock_get.call_args_list
    assert list_call.args[0] == f"{BASE}/v1/reference-data/locations/hotels/by-city"
    assert list_call.kwargs["params"]["cityCode"] == "LON"
    assert list_call.kwargs["params"]["radius"] == 5
    assert list_call.kwargs["params"]["radiusUnit"] == "KM"

    params = offers_call.kwargs["params"]
    assert offers_call.args[0] == f"{BASE}/v3/shopping/hotel-offers"
    assert params["hotelIds"].split(",") == [f"HL{i:04d}" for i in range(20)]
    assert params["checkInDate"] == "2025-06-01"
    assert params["checkOutDate"] == "2025-06-08"
    assert params["adults"] == 2
    assert params["bestRateOnly"] == "true"

    assert [h.name for h in hotels] == ["Tower View", "Plain Rooms", "Unrated"]
    tower, plain, unrated = hotels
    assert tower.price == Decimal("210.50")
    assert tower.currency == "GBP"
    assert tower.rating == 4.0
    assert tower.location == "London"
    assert tower.hotel_id == "HL0001"
    assert plain.rating == 5.0
    assert plain.location == "LON"
    assert plain.currency == "USD"
    assert unrated.rating == 4.0


@patch("requests.get")
def test_search_hotels_unmapped_code_passes_through(mock_get, client, respond):
    mock_get.side_effect = [respond({"data": [{"hotelId": "XX01"}]}), respond({"data": []})]

    assert client.search_hotels("XYZ", DEP, RET, 1) == []
    assert mock_get.call_args_list[0].kwargs["params"]["cityCode"] == "XYZ"


@patch("requests.get")
def test_search_hotels_without_ids(mock_get, client, respond):
    mock_get.return_value = respond({"data": []})

    with pytest.raises(NoInventoryError):
        client.search_hotels("IST", DEP, RET, 1)
    mock_get.assert_called_once()


@patch("requests.get")
def test_search_hotels_offer_stage_failure(mock_get, client, respond, hotel_list_payload):
    mock_get.side_effect = [respond(hotel_list_payload), respond("rate limited", status_code=429)]

    with pytest.raises(ProviderError) as info:
        client.search_hotels("CDG", DEP, RET, 1)
    assert info.value.status == 429


def test_from_settings_builds_session():
    settings = Settings(
        AMADEUS_ENV="production",
        AMADEUS_CLIENT_ID="id",
        AMADEUS_CLIENT_SECRET="secret",
        SETTLEMENT_CURRENCY="eur",
    )
    client = AmadeusClient.from_settings(settings)

    assert client.configured
    assert client.base_url == "https://api.amadeus.com"
    assert client.session.token_url == "https://api.amadeus.com/v1/security/oauth2/token"
    assert client.currency == "EUR"


@patch("requests.get")
def test_null_price_drops_only_that_flight(mock_get, client, respond):
    mock_get.return_value = respond(
        {
            "data": [
                {
                    "price": {"currency": "USD", "grandTotal": None},
                    "validatingAirlineCodes": ["BA"],
                    "itineraries": [{"duration": "PT8H", "segments": []}],
                },
                {
                    "price": {"currency": None, "grandTotal": "300"},
                    "validatingAirlineCodes": ["TK"],
                    "itineraries": [{"duration": None, "segments": None}],
                },
            ]
        }
    )

    flights = client.search_flights("LHR", "JFK", DEP, RET, 1)

    assert len(flights) == 1
    assert flights[0].price == Decimal("300")
    assert flights[0].airline_code == "TK"
    assert flights[0].currency == "USD"
    assert flights[0].duration == ""


@patch("requests.get")
def test_null_hotel_fields_keep_the_record(mock_get, client, respond):
    offers = {
        "data": [
            {
                "available": True,
                "hotel": {"hotelId": "H1", "name": "Null Rating", "cityCode": "PAR", "rating": None, "address": None},
                "offers": [{"price": {"currency": "EUR", "total": "150"}}],
            },
            {
                "available": True,
                "hotel": {"hotelId": "H2", "name": "Rated", "cityCode": "PAR", "rating": "3"},
                "offers": [{"price": {"currency": "EUR", "total": "110"}}],
            },
            {
                "available": True,
                "hotel": {"hotelId": "H3", "name": "Null Price", "cityCode": "PAR"},
                "offers": [{"price": {"total": None}}],
            },
        ]
    }
    mock_get.side_effect = [respond({"data": [{"hotelId": "H1"}, {"hotelId": None}]}), respond(offers)]

    hotels = client.search_hotels("CDG", DEP, RET, 1)

    assert [h.name for h in hotels] == ["Null Rating", "Rated"]
    assert hotels[0].rating == 4.0
    assert hotels[0].location == "PAR"
    assert hotels[1].rating == 3.0
    assert mock_get.call_args_list[1].kwargs["params"]["hotelIds"] == "H1"
