from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Mapping, Optional

import requests

from .amadeus_wire import (
    FlightOffersResponse,
    HotelListResponse,
    HotelOffersResponse,
    decode,
)
from .auth import TokenSession
from .config import Settings
from .errors import NoInventoryError, ProviderError
from .formatting import (
    airline_name,
    airport_to_city,
    flight_search_link,
    format_iso_duration,
    parse_price,
    parse_rating,
)
from .models import FlightOffer, HotelOffer

logger = logging.getLogger(__name__)

MAX_FLIGHT_OFFERS = 6
MAX_HOTEL_IDS = 20
HOTEL_RADIUS_KM = 5


class AmadeusClient:
    """
    Client for the Amadeus Self-Service flight and hotel APIs.

    Every call obtains its bearer token from the shared
    :class:`TokenSession`. Nothing is retried here; callers decide what
    to do with the typed errors.
    """

    def __init__(
        self,
        session: TokenSession,
        base_url: str,
        *,
        timeout: float = 30.0,
        currency: str = "USD",
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.currency = currency

    @classmethod
    def from_settings(
        cls, settings: Settings, session: Optional[TokenSession] = None
    ) -> "AmadeusClient":
        if session is None:
            session = TokenSession(
                settings.amadeus_client_id,
                settings.amadeus_client_secret,
                settings.amadeus_base_url,
                timeout=settings.marketplace_timeout_s,
            )
        return cls(
            session,
            settings.amadeus_base_url,
            timeout=settings.marketplace_timeout_s,
            currency=settings.settlement_currency,
        )

    @property
    def configured(self) -> bool:
        return self.session.configured

    # ──────────────────────────────────────────────────────────

    def _get(self, path: str, params: Mapping[str, Any]) -> str:
        token = self.session.acquire()
        try:
            resp = requests.get(
                f"{self.base_url}{path}",
                params=params,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ProviderError(None, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise ProviderError(resp.status_code, resp.text)
        return resp.text

    # ── flights ──────────────────────────────────────────────

    def search_flights(
        self,
        origin: str,
        destination: str,
        departure_date: date,
        return_date: Optional[date],
        adults: int,
    ) -> List[FlightOffer]:
        """Return up to six priced offers for the route."""
        params: dict[str, Any] = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure_date.isoformat(),
            "adults": adults,
            "max": MAX_FLIGHT_OFFERS,
            "currencyCode": self.currency,
        }
        if return_date is not None:
            params["returnDate"] = return_date.isoformat()

        body = self._get("/v2/shopping/flight-offers", params)
        payload = decode(FlightOffersResponse, body)
        link = flight_search_link(
            origin, destination, departure_date, return_date, self.currency
        )
        return self._to_flights(payload, link)

    def _to_flights(
        self, payload: FlightOffersResponse, link: str
    ) -> List[FlightOffer]:
        flights: List[FlightOffer] = []
        for item in payload.data:
            if not item.itineraries:
                continue
            price = parse_price(item.price.grand_total)
            if price <= 0:
                continue

            outbound = item.itineraries[0]
            if outbound.segments:
                code = outbound.segments[0].carrier_code
            elif item.validating_airline_codes:
                code = item.validating_airline_codes[0]
            else:
                code = ""

            fields: dict[str, Any] = {
                "price": price,
                "currency": item.price.currency or self.currency,
                "airline": airline_name(code),
                "airline_code": code,
                "flight_number": "",
                "departure_time": "",
                "arrival_time": "",
                "duration": format_iso_duration(outbound.duration),
                "stops": max(0, len(outbound.segments) - 1),
                "booking_link": link,
            }
            if outbound.segments:
                fields["departure_time"] = outbound.segments[0].departure.at
                fields["arrival_time"] = outbound.segments[-1].arrival.at
                fields["flight_number"] = code + outbound.segments[0].number

            if len(item.itineraries) >= 2:
                inbound = item.itineraries[1]
                fields["return_duration"] = format_iso_duration(inbound.duration)
                fields["return_stops"] = max(0, len(inbound.segments) - 1)
                if inbound.segments:
                    fields["return_departure_time"] = inbound.segments[0].departure.at
                    fields["return_arrival_time"] = inbound.segments[-1].arrival.at

            flights.append(FlightOffer(**fields))
        return flights

    # ── hotels ───────────────────────────────────────────────

    def search_hotels(
        self,
        city_or_airport: str,
        check_in: date,
        check_out: date,
        adults: int,
    ) -> List[HotelOffer]:
        """Resolve hotel IDs for the city, then fetch best-rate offers for them."""
        city_code = airport_to_city(city_or_airport)
        hotel_ids = self.hotel_ids_by_city(city_code)
        if not hotel_ids:
            raise NoInventoryError(f"no hotels found for city {city_code}")

        body = self._get(
            "/v3/shopping/hotel-offers",
            {
                "hotelIds": ",".join(hotel_ids),
                "checkInDate": check_in.isoformat(),
                "checkOutDate": check_out.isoformat(),
                "adults": adults,
                "roomQuantity": 1,
                "currency": self.currency,
                "bestRateOnly": "true",
            },
        )
        return self._to_hotels(decode(HotelOffersResponse, body))

    def hotel_ids_by_city(self, city_code: str) -> List[str]:
        body = self._get(
            "/v1/reference-data/locations/hotels/by-city",
            {
                "cityCode": city_code,
                "radius": HOTEL_RADIUS_KM,
                "radiusUnit": "KM",
                "hotelSource": "ALL",
            },
        )
        payload = decode(HotelListResponse, body)
        ids = [ref.hotel_id for ref in payload.data if ref.hotel_id]
        return ids[:MAX_HOTEL_IDS]

    def _to_hotels(self, payload: HotelOffersResponse) -> List[HotelOffer]:
        hotels: List[HotelOffer] = []
        for item in payload.data:
            if not item.available or not item.offers:
                continue
            best = item.offers[0]
            price = parse_price(best.price.total)
            if price <= 0:
                continue
            hotels.append(
                HotelOffer(
                    name=item.hotel.name,
                    hotel_id=item.hotel.hotel_id or None,
                    price=price,
                    rating=parse_rating(item.hotel.rating or None),
                    location=item.hotel.address.city_name or item.hotel.city_code,
                    currency=best.price.currency or self.currency,
                )
            )
        return hotels


__all__ = ["AmadeusClient", "MAX_FLIGHT_OFFERS", "MAX_HOTEL_IDS"]
