"""
orchestrator – live-or-synthetic decision for one search request.

Flights and hotels each go through the same pipeline: an attempt against
the marketplace yields either offers or an error, and any error (or an
empty result) is replaced by synthetic data. The response is ``live``
only when both resources resolved live.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from .amadeus_client import AmadeusClient
from .config import Settings, get_settings
from .errors import NoInventoryError
from .fallback import synthesize_flights, synthesize_hotels
from .models import FlightOffer, HotelOffer, Provenance, SearchOutcome, TripQuery
from .recommender import HuggingFaceClient, recommend

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Attempt(Generic[T]):
    """Outcome of one live call: offers, or the error that replaced them."""

    items: Tuple[T, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class Resolution(Generic[T]):
    items: Tuple[T, ...]
    live: bool
    reason: Optional[str] = None


def attempt(call: Callable[[], List[T]]) -> Attempt[T]:
    try:
        items = call()
    except Exception as exc:
        return Attempt(error=exc)
    if not items:
        return Attempt(error=NoInventoryError("marketplace returned 0 results"))
    return Attempt(items=tuple(items))


def resolve(
    resource: str,
    live: Optional[Callable[[], List[T]]],
    synthetic: Callable[[], List[T]],
    skip_reason: str = "marketplace not configured",
) -> Resolution[T]:
    """Run *live* when given, falling back to *synthetic* on any failure."""
    if live is None:
        logger.info("Using estimated %s: %s", resource, skip_reason)
        return Resolution(tuple(synthetic()), live=False, reason=skip_reason)

    result = attempt(live)
    if result.ok:
        logger.info("Marketplace: %d live %s found", len(result.items), resource)
        return Resolution(result.items, live=True)

    logger.warning(
        "Marketplace %s search failed: %s – using fallback", resource, result.error
    )
    return Resolution(tuple(synthetic()), live=False, reason=str(result.error))


class TripSearch:
    """Aggregates flights, hotels and a recommendation for one trip query."""

    def __init__(
        self,
        marketplace: Optional[AmadeusClient] = None,
        ai: Optional[HuggingFaceClient] = None,
    ) -> None:
        self.marketplace = marketplace
        self.ai = ai

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, *, warm_up: bool = True
    ) -> "TripSearch":
        """Wire clients from configuration; missing credentials disable them."""
        settings = settings or get_settings()

        marketplace = None
        if settings.amadeus_configured:
            marketplace = AmadeusClient.from_settings(settings)
            if warm_up and marketplace.session.warm_up():
                logger.info("Marketplace API authenticated")
        else:
            logger.warning(
                "AMADEUS_CLIENT_ID or AMADEUS_CLIENT_SECRET not set – "
                "flight/hotel search will use fallback data"
            )

        ai = None
        if settings.ai_configured:
            ai = HuggingFaceClient.from_settings(settings)
            logger.info("AI initialised with model %s", settings.hf_model)
        else:
            logger.warning("HUGGINGFACE_API_KEY not set – AI summaries will use fallback text")

        return cls(marketplace, ai)

    @property
    def live_enabled(self) -> bool:
        return self.marketplace is not None and self.marketplace.configured

    def resolve_flights(self, query: TripQuery) -> Resolution[FlightOffer]:
        live = None
        if self.live_enabled:
            live = partial(
                self.marketplace.search_flights,
                query.origin,
                query.destination,
                query.departure_date,
                query.return_date,
                query.passengers,
            )

        return resolve(
            "flights",
            live,
            lambda: synthesize_flights(
                query.origin, query.destination, query.departure_date, query.return_date
            ),
        )

    def resolve_hotels(
        self, query: TripQuery, flights_live: bool
    ) -> Resolution[HotelOffer]:
        # Once flights fell back, hotels are not attempted live for this request.
        live = None
        reason = "marketplace not configured"
        if self.live_enabled and flights_live:
            live = partial(
                self.marketplace.search_hotels,
                query.destination,
                query.departure_date,
                query.return_date,
                query.passengers,
            )
        elif self.live_enabled:
            reason = "flights already fell back"

        return resolve(
            "hotels", live, lambda: synthesize_hotels(query.destination), reason
        )

    def run(self, query: TripQuery) -> SearchOutcome:
        flights = self.resolve_flights(query)
        hotels = self.resolve_hotels(query, flights.live)

        is_live = flights.live and hotels.live
        source = Provenance.LIVE if is_live else Provenance.ESTIMATED

        summary = recommend(
            query, flights.items, hotels.items, not is_live, client=self.ai
        )
        return SearchOutcome(
            flights=flights.items,
            hotels=hotels.items,
            source=source,
            recommendation=summary,
        )


__all__ = ["Attempt", "Resolution", "attempt", "resolve", "TripSearch"]
