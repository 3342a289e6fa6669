"""Wire-format shapes of the Amadeus Self-Service responses we consume.

Only the fields the client maps are declared; everything else in the
payload is ignored. These types never leave :mod:`trip_scout.amadeus_client`.
"""

from __future__ import annotations

from typing import Any, List, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ParseError


class _Wire(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # explicit nulls fall back to the field default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ── /v2/shopping/flight-offers ───────────────────────────────


class Endpoint(_Wire):
    iata_code: str = Field("", alias="iataCode")
    at: str = ""


class Segment(_Wire):
    departure: Endpoint = Field(default_factory=Endpoint)
    arrival: Endpoint = Field(default_factory=Endpoint)
    carrier_code: str = Field("", alias="carrierCode")
    number: str = ""


class Itinerary(_Wire):
    duration: str = ""
    segments: List[Segment] = Field(default_factory=list)


class FlightPrice(_Wire):
    grand_total: str = Field("", alias="grandTotal")
    currency: str = ""


class FlightOfferItem(_Wire):
    price: FlightPrice = Field(default_factory=FlightPrice)
    itineraries: List[Itinerary] = Field(default_factory=list)
    validating_airline_codes: List[str] = Field(
        default_factory=list, alias="validatingAirlineCodes"
    )


class FlightOffersResponse(_Wire):
    data: List[FlightOfferItem] = Field(default_factory=list)


# ── /v1/reference-data/locations/hotels/by-city ──────────────


class HotelRef(_Wire):
    hotel_id: str = Field("", alias="hotelId")
    name: str = ""
    iata_code: str = Field("", alias="iataCode")


class HotelListResponse(_Wire):
    data: List[HotelRef] = Field(default_factory=list)


# ── /v3/shopping/hotel-offers ────────────────────────────────


class HotelAddress(_Wire):
    lines: List[str] = Field(default_factory=list)
    city_name: str = Field("", alias="cityName")
    country_code: str = Field("", alias="countryCode")


class Hotel(_Wire):
    hotel_id: str = Field("", alias="hotelId")
    name: str = ""
    city_code: str = Field("", alias="cityCode")
    address: HotelAddress = Field(default_factory=HotelAddress)
    rating: str = ""


class RoomPrice(_Wire):
    total: str = ""
    currency: str = ""


class RoomOffer(_Wire):
    price: RoomPrice = Field(default_factory=RoomPrice)


class HotelOffersItem(_Wire):
    hotel: Hotel = Field(default_factory=Hotel)
    available: bool = False
    offers: List[RoomOffer] = Field(default_factory=list)


class HotelOffersResponse(_Wire):
    data: List[HotelOffersItem] = Field(default_factory=list)


W = TypeVar("W", bound=_Wire)


def decode(model: Type[W], body: Union[str, bytes]) -> W:
    """Validate a raw JSON body against *model*, raising :class:`ParseError`."""
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise ParseError(
            f"unexpected {model.__name__} payload: {exc.error_count()} error(s)"
        ) from exc


__all__ = [
    "FlightOffersResponse",
    "HotelListResponse",
    "HotelOffersResponse",
    "decode",
]
