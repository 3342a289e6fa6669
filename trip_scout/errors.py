from __future__ import annotations

from typing import Optional


class TripScoutError(RuntimeError):
    """Base class for failures raised by the aggregation layer."""


class AuthError(TripScoutError):
    """Client-credentials exchange was rejected or unreadable."""


class ProviderError(TripScoutError):
    """Marketplace answered with a non-2xx status (or never answered)."""

    def __init__(self, status: Optional[int], body: str, message: str = "") -> None:
        self.status = status
        self.body = body
        label = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(message or f"{label} – {body[:200]}")


class ParseError(TripScoutError):
    """Response body does not match the expected provider schema."""


class NoInventoryError(TripScoutError):
    """Marketplace returned zero candidates at an intermediate stage."""


class AIError(TripScoutError):
    """Text-generation provider unusable or returned nothing."""


class ModelLoadingError(AIError):
    """Model is cold-starting on the provider side (HTTP 503)."""


class EmptyInputError(TripScoutError):
    """Nothing to recommend from: no flights and no hotels."""


__all__ = [
    "TripScoutError",
    "AuthError",
    "ProviderError",
    "ParseError",
    "NoInventoryError",
    "AIError",
    "ModelLoadingError",
    "EmptyInputError",
]
