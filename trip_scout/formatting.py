from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional
from urllib.parse import quote

DEFAULT_RATING = 4.0
MAX_RATING = 5.0

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:[\d.]+S)?)?$"
)
_LEADING_NUMBER = re.compile(r"^\s*([0-9]*\.?[0-9]+)")

# Hotel search works on city codes, flights on airport codes.
AIRPORT_TO_CITY = {
    "LHR": "LON", "LGW": "LON", "STN": "LON", "LTN": "LON",
    "CDG": "PAR", "ORY": "PAR",
    "JFK": "NYC", "LGA": "NYC", "EWR": "NYC",
    "LAX": "LAX",
    "DXB": "DXB",
    "IST": "IST",
    "FRA": "FRA",
    "AMS": "AMS",
    "BER": "BER", "SXF": "BER",
    "MAD": "MAD",
    "BCN": "BCN",
    "FCO": "ROM", "CIA": "ROM",
    "TAS": "TAS",
    "NRT": "TYO", "HND": "TYO",
    "SIN": "SIN",
    "BKK": "BKK",
}

AIRLINE_NAMES = {
    "TK": "Turkish Airlines", "LH": "Lufthansa", "AF": "Air France",
    "BA": "British Airways", "EK": "Emirates", "QR": "Qatar Airways",
    "PC": "Pegasus Airlines", "FR": "Ryanair", "U2": "EasyJet",
    "W6": "Wizz Air", "FZ": "FlyDubai", "HY": "Uzbekistan Airways",
    "UA": "United Airlines", "AA": "American Airlines", "DL": "Delta Air Lines",
    "KL": "KLM", "IB": "Iberia", "AZ": "ITA Airways",
    "OS": "Austrian Airlines", "LX": "Swiss International Air Lines",
    "SQ": "Singapore Airlines", "CX": "Cathay Pacific", "NH": "ANA",
    "JL": "Japan Airlines", "EY": "Etihad Airways",
    "SV": "Saudi Arabian Airlines", "MS": "EgyptAir", "RJ": "Royal Jordanian",
    "ET": "Ethiopian Airlines", "KQ": "Kenya Airways",
    "SA": "South African Airways",
}


def _join_hours_minutes(hours: int, minutes: int) -> str:
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return " ".join(parts)


def format_iso_duration(iso: str) -> str:
    """Rewrite ``PT5H30M`` as ``5h 30m``.

    Zero or missing parts are dropped, days are folded into hours and
    seconds are ignored. Empty input gives an empty string; anything that
    is not an ISO-8601 duration is returned unchanged.
    """
    if not iso:
        return ""
    match = _ISO_DURATION.match(iso.strip().upper())
    if not match:
        return iso
    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0) + 24 * days
    minutes = int(match.group("minutes") or 0)
    return _join_hours_minutes(hours, minutes)


def format_minutes(total_minutes: int) -> str:
    """``330`` -> ``5h 30m``; ``240`` -> ``4h``."""
    hours, minutes = divmod(total_minutes, 60)
    return _join_hours_minutes(hours, minutes)


def parse_price(raw: Optional[str]) -> Decimal:
    """Return *raw* as a Decimal, or ``0`` when it is not a finite number."""
    if raw is None:
        return Decimal(0)
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value


def parse_rating(raw: Optional[str]) -> float:
    """Star rating from a free-text field, clamped to [0, 5].

    Missing, unreadable or non-positive ratings fall back to 4.0.
    """
    if raw is None:
        return DEFAULT_RATING
    match = _LEADING_NUMBER.match(str(raw))
    if match is None:
        return DEFAULT_RATING
    rating = float(match.group(1))
    if rating <= 0:
        return DEFAULT_RATING
    return min(rating, MAX_RATING)


def airport_to_city(code: str) -> str:
    """Map an airport IATA code to its city code; unknown codes pass through."""
    return AIRPORT_TO_CITY.get(code, code)


def airline_name(code: str) -> str:
    if code in AIRLINE_NAMES:
        return AIRLINE_NAMES[code]
    if code:
        return f"{code} Airlines"
    return "Unknown Airline"


def flight_search_link(
    origin: str,
    destination: str,
    departure_date: date,
    return_date: Optional[date],
    currency: str,
) -> str:
    """Google Flights deep link for the route, round trip when *return_date* is set."""
    flt = f"{origin}.{destination}.{departure_date.isoformat()}"
    if return_date is not None:
        flt += f"*{destination}.{origin}.{return_date.isoformat()}"
    return f"https://www.google.com/travel/flights?hl=en#flt={quote(flt, safe='.*')};c:{currency}"


__all__ = [
    "AIRPORT_TO_CITY",
    "AIRLINE_NAMES",
    "format_iso_duration",
    "format_minutes",
    "parse_price",
    "parse_rating",
    "airport_to_city",
    "airline_name",
    "flight_search_link",
]
