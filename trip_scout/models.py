"""Provider-agnostic data models used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple, Union


class Provenance(str, Enum):
    LIVE = "live"
    ESTIMATED = "estimated"


@dataclass(slots=True)
class FlightOffer:
    price: Decimal
    currency: str
    airline: str
    airline_code: str
    flight_number: str
    departure_time: str
    arrival_time: str
    duration: str
    stops: int
    return_departure_time: Optional[str] = None
    return_arrival_time: Optional[str] = None
    return_duration: Optional[str] = None
    return_stops: Optional[int] = None
    booking_link: Optional[str] = None

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"flight price must be positive, got {self.price}")
        if self.stops < 0:
            raise ValueError(f"stop count must be >= 0, got {self.stops}")
        has_return_times = (
            self.return_departure_time is not None
            or self.return_arrival_time is not None
        )
        if has_return_times and (
            self.return_duration is None or self.return_stops is None
        ):
            raise ValueError("return timestamps require return duration and stops")
        if self.return_stops is not None and self.return_stops < 0:
            raise ValueError(f"return stop count must be >= 0, got {self.return_stops}")

    @property
    def has_return(self) -> bool:
        return self.return_duration is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "price": float(self.price),
            "currency": self.currency,
            "airline": self.airline,
            "airline_code": self.airline_code,
            "flight_number": self.flight_number,
            "departure_time": self.departure_time,
            "arrival_time": self.arrival_time,
            "duration": self.duration,
            "stops": self.stops,
            "return_departure_time": self.return_departure_time,
            "return_arrival_time": self.return_arrival_time,
            "return_duration": self.return_duration,
            "return_stops": self.return_stops,
            "booking_link": self.booking_link,
        }
        return {k: v for k, v in data.items() if v not in (None, "")}


@dataclass(slots=True)
class HotelOffer:
    name: str
    price: Decimal
    rating: float = 4.0
    location: str = ""
    currency: str = "USD"
    hotel_id: Optional[str] = None
    booking_link: Optional[str] = None

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"hotel price must be positive, got {self.price}")
        if not 0.0 <= self.rating <= 5.0:
            raise ValueError(f"rating must be within [0, 5], got {self.rating}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "hotel_id": self.hotel_id,
            "price": float(self.price),
            "rating": self.rating,
            "location": self.location,
            "currency": self.currency,
            "booking_link": self.booking_link,
        }
        return {k: v for k, v in data.items() if v not in (None, "")}


@dataclass(frozen=True, slots=True)
class TripQuery:
    """Parameters of one search request, already validated upstream."""

    origin: str
    destination: str
    departure_date: date
    return_date: date
    budget: Decimal
    passengers: int = 1

    @classmethod
    def create(
        cls,
        origin: str,
        destination: str,
        departure_date: Union[date, str],
        return_date: Union[date, str],
        budget: Union[Decimal, float, int, str],
        passengers: Optional[int] = None,
    ) -> "TripQuery":
        """Normalise raw request values the way the HTTP layer hands them over."""
        if isinstance(departure_date, str):
            departure_date = date.fromisoformat(departure_date)
        if isinstance(return_date, str):
            return_date = date.fromisoformat(return_date)
        return cls(
            origin=origin.strip().upper(),
            destination=destination.strip().upper(),
            departure_date=departure_date,
            return_date=return_date,
            budget=Decimal(str(budget)),
            passengers=passengers if passengers and passengers > 0 else 1,
        )

    @property
    def nights(self) -> int:
        return max(1, (self.return_date - self.departure_date).days)


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    flights: Tuple[FlightOffer, ...]
    hotels: Tuple[HotelOffer, ...]
    source: Provenance
    recommendation: str

    @property
    def is_estimated(self) -> bool:
        return self.source is Provenance.ESTIMATED

    def to_dict(self) -> dict[str, Any]:
        return {
            "flights": [f.to_dict() for f in self.flights],
            "hotels": [h.to_dict() for h in self.hotels],
            "ai_summary": self.recommendation,
            "source": self.source.value,
        }


__all__ = [
    "Provenance",
    "FlightOffer",
    "HotelOffer",
    "TripQuery",
    "SearchOutcome",
]
