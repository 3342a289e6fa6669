from __future__ import annotations

import json
import logging
from typing import Optional

import click

from .amadeus_client import AmadeusClient
from .config import get_settings
from .errors import AuthError
from .models import TripQuery
from .orchestrator import TripSearch

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str, log_file: Optional[str] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        format=LOG_FORMAT,
    )


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: Optional[str]) -> None:
    """Flight and hotel search with live data or estimates."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, settings.log_file)


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.option("--depart", "departure", required=True, help="Departure date (YYYY-MM-DD)")
@click.option("--return", "return_date", required=True, help="Return date (YYYY-MM-DD)")
@click.option("--budget", type=float, required=True, help="Total budget in USD")
@click.option("--passengers", type=int, default=1, show_default=True)
def search(
    origin: str,
    destination: str,
    departure: str,
    return_date: str,
    budget: float,
    passengers: int,
) -> None:
    """Run one search and print the outcome as JSON."""
    try:
        query = TripQuery.create(
            origin, destination, departure, return_date, budget, passengers
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    outcome = TripSearch.from_settings().run(query)
    click.echo(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
def token() -> None:
    """Check the marketplace credential exchange without printing the token."""
    settings = get_settings()
    click.echo(f"Base URL: {settings.amadeus_base_url}")
    click.echo(
        f"Credentials: client_id={'set' if settings.amadeus_client_id else 'missing'}, "
        f"client_secret={'set' if settings.amadeus_client_secret else 'missing'}"
    )
    if not settings.amadeus_configured:
        raise click.ClickException("marketplace credentials are not configured")

    session = AmadeusClient.from_settings(settings).session
    try:
        session.acquire()
    except AuthError as exc:
        logger.error("Token exchange failed: %s", exc)
        raise click.ClickException(f"token exchange failed: {exc}") from exc
    click.echo("Token: OK")


if __name__ == "__main__":
    cli()
