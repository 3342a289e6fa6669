"""
fallback – deterministic flight/hotel options used when live data is missing.

Output depends only on the arguments: no clock, no randomness, no network.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, List, Optional, Tuple

from .formatting import airport_to_city, flight_search_link, format_minutes
from .models import FlightOffer, HotelOffer

CURRENCY = "USD"
CONNECTION_PENALTY_MIN = 90
PRICE_STEP = Decimal(5)


@dataclass(frozen=True, slots=True)
class RouteInfo:
    base_price: Decimal
    duration_min: int


@dataclass(frozen=True, slots=True)
class AirlineProfile:
    name: str
    code: str
    price_multiplier: Decimal
    stops: int
    outbound_hour: int
    return_hour: int


DEFAULT_ROUTE = RouteInfo(Decimal(350), 240)


def _both_ways(table: Dict[Tuple[str, str], Tuple[int, int]]) -> Dict[Tuple[str, str], RouteInfo]:
    routes: Dict[Tuple[str, str], RouteInfo] = {}
    for (a, b), (price, minutes) in table.items():
        routes[(a, b)] = routes[(b, a)] = RouteInfo(Decimal(price), minutes)
    return routes


ROUTES = _both_ways(
    {
        ("TAS", "IST"): (280, 300),
        ("TAS", "DXB"): (320, 210),
        ("TAS", "FRA"): (450, 420),
        ("TAS", "LHR"): (500, 480),
        ("TAS", "CDG"): (480, 450),
        ("BER", "PAR"): (120, 105),
        ("BER", "LHR"): (100, 100),
        ("IST", "DXB"): (250, 240),
        ("LHR", "JFK"): (450, 480),
        ("LHR", "CDG"): (80, 75),
        ("FRA", "IST"): (150, 165),
    }
)

# Departures spread across the day: 06:00, 09:00, ... / returns 08:00, 10:00, ...
AIRLINE_PROFILES: Tuple[AirlineProfile, ...] = tuple(
    AirlineProfile(name, code, Decimal(mult), stops, 6 + i * 3, 8 + i * 2)
    for i, (name, code, mult, stops) in enumerate(
        [
            ("Turkish Airlines", "TK", "1.00", 0),
            ("Lufthansa", "LH", "1.15", 0),
            ("Emirates", "EK", "1.30", 0),
            ("Wizz Air", "W6", "0.65", 1),
            ("FlyDubai", "FZ", "0.80", 1),
        ]
    )
)


def _h(name: str, price: int, rating: float, location: str) -> HotelOffer:
    return HotelOffer(
        name=name, price=Decimal(price), rating=rating, location=location,
        currency=CURRENCY,
    )


_PARIS = [
    ("Hotel Le Marais", 220, 4.6, "Le Marais, Paris"),
    ("Pullman Paris Tour Eiffel", 280, 4.5, "7th Arr., Paris"),
    ("Ibis Paris Montmartre", 95, 4.0, "Montmartre, Paris"),
    ("Hotel des Arts Montmartre", 130, 4.3, "18th Arr., Paris"),
    ("Generator Paris", 55, 3.8, "10th Arr., Paris"),
]

CITY_HOTELS: Dict[str, List[Tuple[str, int, float, str]]] = {
    "IST": [
        ("Grand Hyatt Istanbul", 180, 4.7, "Beyoglu, Istanbul"),
        ("Hilton Istanbul Bosphorus", 165, 4.5, "Besiktas, Istanbul"),
        ("Sultan Ahmet Palace Hotel", 95, 4.3, "Sultanahmet, Istanbul"),
        ("Ibis Istanbul Taksim", 75, 4.0, "Taksim, Istanbul"),
        ("The Marmara Taksim", 140, 4.4, "Taksim Square, Istanbul"),
    ],
    "CDG": _PARIS,
    "PAR": _PARIS,
    "LHR": [
        ("Hilton London Tower Bridge", 180, 4.4, "Tower Bridge, London"),
        ("Premier Inn London City", 95, 4.1, "City of London"),
        ("The Hoxton Shoreditch", 165, 4.5, "Shoreditch, London"),
        ("Generator London", 50, 3.8, "Russell Square, London"),
        ("citizenM London Bankside", 145, 4.4, "Bankside, London"),
    ],
    "DXB": [
        ("JW Marriott Marquis", 220, 4.6, "Business Bay, Dubai"),
        ("Rove Downtown", 95, 4.3, "Downtown Dubai"),
        ("Premier Inn Dubai", 65, 4.0, "Ibn Battuta, Dubai"),
        ("Atlantis The Palm", 380, 4.7, "Palm Jumeirah, Dubai"),
        ("Hilton Dubai Al Habtoor City", 160, 4.4, "Dubai Marina"),
    ],
    "FRA": [
        ("Marriott Frankfurt City Center", 155, 4.4, "Sachsenhausen, Frankfurt"),
        ("Motel One Frankfurt-Römer", 89, 4.3, "Römer, Frankfurt"),
        ("Hilton Frankfurt City Centre", 175, 4.5, "City Centre, Frankfurt"),
        ("Generator Frankfurt", 45, 3.9, "Sachsenhausen, Frankfurt"),
        ("Steigenberger Frankfurter Hof", 280, 4.6, "Kaiserplatz, Frankfurt"),
    ],
    "BER": [
        ("Hotel Adlon Kempinski", 320, 4.8, "Mitte, Berlin"),
        ("Radisson Blu Berlin", 150, 4.4, "Alexanderplatz, Berlin"),
        ("Motel One Berlin Hackescher Markt", 85, 4.2, "Mitte, Berlin"),
        ("Generator Berlin Mitte", 45, 3.9, "Mitte, Berlin"),
        ("Michelberger Hotel", 130, 4.5, "Friedrichshain, Berlin"),
    ],
}
CITY_HOTELS["LON"] = CITY_HOTELS["LHR"]

GENERIC_HOTELS: List[Tuple[str, int, float, str]] = [
    ("Grand City Hotel", 150, 4.5, "City Center, {code}"),
    ("Business Inn", 95, 4.2, "Business District, {code}"),
    ("Boutique Residence", 120, 4.4, "Arts District, {code}"),
    ("Economy Suites", 65, 3.9, "Near Airport, {code}"),
    ("Luxury Collection", 240, 4.7, "Historic Center, {code}"),
]


def _stamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def route_info(origin: str, destination: str) -> RouteInfo:
    return ROUTES.get((origin, destination), DEFAULT_ROUTE)


def synthesize_flights(
    origin: str,
    destination: str,
    departure_date: date,
    return_date: Optional[date],
) -> List[FlightOffer]:
    """Five plausible offers for the route, one per airline profile."""
    info = route_info(origin, destination)
    link = flight_search_link(origin, destination, departure_date, return_date, CURRENCY)

    flights: List[FlightOffer] = []
    for profile in AIRLINE_PROFILES:
        price = (info.base_price * profile.price_multiplier / PRICE_STEP).to_integral_value(
            rounding=ROUND_FLOOR
        ) * PRICE_STEP
        minutes = info.duration_min
        if profile.stops > 0:
            minutes += CONNECTION_PENALTY_MIN
        leg = timedelta(minutes=minutes)

        depart = datetime.combine(
            departure_date, time(profile.outbound_hour), tzinfo=timezone.utc
        )
        inbound: dict = {}
        if return_date is not None:
            back = datetime.combine(
                return_date, time(profile.return_hour), tzinfo=timezone.utc
            )
            inbound = {
                "return_departure_time": _stamp(back),
                "return_arrival_time": _stamp(back + leg),
                "return_duration": format_minutes(minutes),
                "return_stops": profile.stops,
            }
        flights.append(
            FlightOffer(
                price=price,
                currency=CURRENCY,
                airline=profile.name,
                airline_code=profile.code,
                flight_number="",
                departure_time=_stamp(depart),
                arrival_time=_stamp(depart + leg),
                duration=format_minutes(minutes),
                stops=profile.stops,
                booking_link=link,
                **inbound,
            )
        )
    return flights


def synthesize_hotels(destination: str) -> List[HotelOffer]:
    """Fixed five-hotel list for *destination*, generic when the city is unknown."""
    rows = CITY_HOTELS.get(destination) or CITY_HOTELS.get(airport_to_city(destination))
    if rows:
        return [_h(*row) for row in rows]
    return [
        _h(name, price, rating, location.format(code=destination))
        for name, price, rating, location in GENERIC_HOTELS
    ]


__all__ = [
    "ROUTES",
    "DEFAULT_ROUTE",
    "AIRLINE_PROFILES",
    "CITY_HOTELS",
    "route_info",
    "synthesize_flights",
    "synthesize_hotels",
]
