from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Sequence, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import Settings
from .errors import AIError, EmptyInputError, ModelLoadingError
from .models import FlightOffer, HotelOffer, TripQuery

logger = logging.getLogger(__name__)

INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"
PROMPT_LIMIT = 5
MAX_NEW_TOKENS = 400
TEMPERATURE = 0.6
UNABLE_MESSAGE = "Unable to provide recommendations at this time."


class _Generation(BaseModel):
    generated_text: str = ""


_GENERATIONS = TypeAdapter(List[_Generation])


class HuggingFaceClient:
    """Text generation through the Hugging Face Inference API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        timeout: float = 60.0,
        max_new_tokens: int = MAX_NEW_TOKENS,
        temperature: float = TEMPERATURE,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "HuggingFaceClient":
        return cls(
            settings.huggingface_api_key,
            settings.hf_model,
            timeout=settings.ai_timeout_s,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise AIError("Hugging Face API key not configured")

        try:
            resp = requests.post(
                INFERENCE_URL.format(model=self.model),
                json={
                    "inputs": prompt,
                    "parameters": {
                        "max_new_tokens": self.max_new_tokens,
                        "temperature": self.temperature,
                        "return_full_text": False,
                    },
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AIError(f"AI request failed: {exc}") from exc

        if resp.status_code == 503:
            raise ModelLoadingError("AI model is loading, retry in a few seconds")
        if resp.status_code != 200:
            raise AIError(f"AI provider error ({resp.status_code}): {resp.text[:200]}")

        try:
            generations = _GENERATIONS.validate_json(resp.text)
        except ValidationError as exc:
            raise AIError(f"failed to parse AI response: {exc.error_count()} error(s)") from exc

        if not generations or not generations[0].generated_text.strip():
            raise AIError("empty response from AI")
        return generations[0].generated_text.strip()


def build_prompt(
    query: TripQuery,
    flights: Sequence[FlightOffer],
    hotels: Sequence[HotelOffer],
    is_estimated: bool,
) -> str:
    """Instruction prompt listing at most five flights and five hotels, in input order."""
    note = " Note: prices are estimated, real-time data unavailable." if is_estimated else ""
    lines = [
        "[INST] You are a helpful travel assistant. Analyze these options "
        "and give brief, honest recommendations.",
        "",
        f"Trip: {query.origin} → {query.destination} | "
        f"{query.departure_date.isoformat()} to {query.return_date.isoformat()} | "
        f"{query.passengers} passenger(s) | Budget: ${query.budget:.0f}{note}",
        "",
        "Flights available:",
    ]
    for i, f in enumerate(flights[:PROMPT_LIMIT], start=1):
        lines.append(f"  {i}. {f.airline} - ${f.price:.0f} ({f.stops} stop(s), {f.duration})")
    lines += ["", "Hotels (per night):"]
    for i, h in enumerate(hotels[:PROMPT_LIMIT], start=1):
        lines.append(f"  {i}. {h.name} - ${h.price:.0f}/night (★{h.rating:.1f}) {h.location}")
    lines += [
        "",
        "In 150 words or fewer, recommend the best flight and hotel that fit "
        'the budget. Explain why briefly. Use sections: "Flight:" and "Hotel:". '
        "Be direct. [/INST]",
    ]
    return "\n".join(lines)


_Offer = TypeVar("_Offer", FlightOffer, HotelOffer)


def _cheapest(offers: Sequence[_Offer]) -> Optional[_Offer]:
    best: Optional[_Offer] = None
    for offer in offers:
        if best is None or offer.price < best.price:
            best = offer
    return best


def heuristic_recommendation(
    budget: Decimal,
    flights: Sequence[FlightOffer],
    hotels: Sequence[HotelOffer],
    nights: int,
) -> str:
    """Cheapest flight plus cheapest hotel, checked against *budget*.

    Raises :class:`EmptyInputError` when there is nothing to pick from.
    """
    flight = _cheapest(flights)
    hotel = _cheapest(hotels)
    if flight is None and hotel is None:
        raise EmptyInputError("no flights and no hotels to recommend from")

    picks = []
    total = Decimal(0)
    covers = []
    if flight is not None:
        picks.append(f"{flight.airline} at ${flight.price:.0f} ({flight.stops} stops)")
        total += flight.price
        covers.append("flight")
    if hotel is not None:
        picks.append(f"{hotel.name} at ${hotel.price:.0f}/night (★ {hotel.rating:.1f})")
        total += hotel.price * nights
        covers.append(f"{nights} nights")

    if total <= budget:
        verdict = (
            f" This combination fits your ${budget:.0f} budget "
            f"with ${budget - total:.0f} to spare."
        )
    else:
        verdict = (
            f" Note: This exceeds your ${budget:.0f} budget by ${total - budget:.0f}."
        )

    label = "Best value picks" if len(picks) == 2 else "Best value pick"
    return (
        f"{label}: {' and '.join(picks)}. "
        f"Estimated total: ${total:.0f} for {' + '.join(covers)}.{verdict}"
    )


def recommend(
    query: TripQuery,
    flights: Sequence[FlightOffer],
    hotels: Sequence[HotelOffer],
    is_estimated: bool,
    client: Optional[HuggingFaceClient] = None,
) -> str:
    """AI-written recommendation, or the deterministic heuristic when AI is unusable."""
    if not flights and not hotels:
        logger.warning("No candidates to recommend from")
        return UNABLE_MESSAGE

    if client is not None:
        try:
            return client.generate(build_prompt(query, flights, hotels, is_estimated))
        except AIError as exc:
            logger.warning("AI recommendation failed: %s – using fallback text", exc)
    else:
        logger.info("AI provider not configured – using fallback text")

    try:
        return heuristic_recommendation(query.budget, flights, hotels, query.nights)
    except EmptyInputError:
        return UNABLE_MESSAGE


__all__ = [
    "HuggingFaceClient",
    "UNABLE_MESSAGE",
    "build_prompt",
    "heuristic_recommendation",
    "recommend",
]
