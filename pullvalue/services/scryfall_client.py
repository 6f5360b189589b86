"""
Scryfall search client.

Runs card searches with the retry policy Scryfall's rate limits call for:
- 429: fixed sleep, then retry
- other transport/server errors: linear backoff, then retry
- 404: "no cards matched", an empty result, never retried
At most `max_attempts` attempts per request; the last error surfaces as
ScryfallError.

Search API: https://scryfall.com/docs/api/cards/search
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from types import TracebackType
from typing import Any

import httpx

from pullvalue.config import settings
from pullvalue.models.card import BoosterType
from pullvalue.models.eligibility import CollectorNumberRange

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ScryfallError(Exception):
    """A Scryfall request failed after all retries."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NoResultsError(ScryfallError):
    """Scryfall reported that nothing matched the query (HTTP 404)."""

    def __init__(self, message: str = "No cards matched the query"):
        super().__init__(message, status_code=404)


def _format_price(value: float) -> str:
    return f"{value:g}"


def price_clause(min_price: float) -> str:
    """Either finish meets the minimum price."""
    price = _format_price(min_price)
    return f"(usd>={price} OR usd_foil>={price})"


def collector_number_clause(ranges: Iterable[CollectorNumberRange]) -> str:
    """Restrict to collector-number ranges; empty string for no restriction."""
    parts = []
    for r in ranges:
        if r.start == r.end:
            parts.append(f"cn:{r.start}")
        else:
            parts.append(f"(cn>={r.start} cn<={r.end})")

    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return "(" + " OR ".join(parts) + ")"


def build_set_query(
    set_code: str,
    booster_type: BoosterType,
    *,
    min_price: float,
    booster_filter: bool,
    exclusive_promos: Iterable[str] = (),
) -> str:
    """
    Search query for one set's booster pool.

    Args:
        set_code: Set to search
        booster_type: Booster product being resolved
        min_price: Minimum price on either finish
        booster_filter: Narrow a play lookup with Scryfall's booster flags.
            Off when a curated set override exists, since the override
            can include printings the flags miss.
        exclusive_promos: Promo types to exclude when booster_filter is on
    """
    clauses = [f"set:{set_code}", "lang:en"]

    if booster_filter and booster_type is BoosterType.PLAY:
        clauses.append("is:booster")
        clauses.append("-is:boosterfun")
        clauses.extend(f"-promo:{promo}" for promo in sorted(exclusive_promos))

    clauses.append(price_clause(min_price))
    return " ".join(clauses)


def build_pool_query(
    source_set: str,
    ranges: Iterable[CollectorNumberRange],
    *,
    min_price: float,
) -> str:
    """Search query for a supplementary pool within its source set."""
    clauses = [f"set:{source_set}", "lang:en"]
    cn = collector_number_clause(ranges)
    if cn:
        clauses.append(cn)
    clauses.append(price_clause(min_price))
    return " ".join(clauses)


class ScryfallClient:
    """
    Async Scryfall search client.

    Usage:
        async with ScryfallClient() as client:
            cards = await client.search("set:mkm lang:en")
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str = settings.scryfall_api_url,
        max_attempts: int = settings.max_attempts,
        rate_limit_delay: float = settings.rate_limit_delay,
        retry_backoff: float = settings.retry_backoff,
        request_delay: float = settings.request_delay,
        max_cards: int = settings.max_cards_per_query,
        sleep: Sleep = asyncio.sleep,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            timeout=settings.http_timeout,
            follow_redirects=True,
        )
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.rate_limit_delay = rate_limit_delay
        self.retry_backoff = retry_backoff
        self.request_delay = request_delay
        self.max_cards = max_cards
        self._sleep = sleep

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """
        GET a JSON document with retries.

        Raises:
            NoResultsError: On HTTP 404
            ScryfallError: When every attempt failed
        """
        last_error = "no attempts made"
        last_status: int | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self._client.get(url, params=params)
            except httpx.RequestError as e:
                last_error = f"{type(e).__name__}: {e}"
                last_status = None
                logger.warning(
                    "Scryfall request failed (attempt %d/%d): %s",
                    attempt,
                    self.max_attempts,
                    last_error,
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_backoff * attempt)
                continue

            if response.status_code == 404:
                raise NoResultsError()

            if response.status_code == 429:
                last_error = "HTTP 429"
                last_status = 429
                logger.warning(
                    "Rate limited by Scryfall (attempt %d/%d), waiting %.1fs",
                    attempt,
                    self.max_attempts,
                    self.rate_limit_delay,
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.rate_limit_delay)
                continue

            if response.is_error:
                last_error = f"HTTP {response.status_code}"
                last_status = response.status_code
                logger.warning(
                    "Scryfall returned %s (attempt %d/%d)",
                    last_error,
                    attempt,
                    self.max_attempts,
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_backoff * attempt)
                continue

            try:
                data = response.json()
            except ValueError as e:
                raise ScryfallError(f"Invalid JSON from Scryfall: {e}") from e
            if not isinstance(data, dict):
                raise ScryfallError("Unexpected Scryfall response shape")
            return data

        raise ScryfallError(
            f"Scryfall request failed after {self.max_attempts} attempts: {last_error}",
            status_code=last_status,
        )

    async def search(self, query: str) -> list[dict[str, Any]]:
        """
        Search cards, most expensive first, following pagination.

        Stops once `max_cards` cards have been collected. A query matching
        nothing returns an empty list.

        Raises:
            ScryfallError: If a page cannot be fetched
        """
        url: str | None = f"{self.base_url}/cards/search"
        params: dict[str, str] | None = {
            "q": query,
            "unique": "prints",
            "order": "usd",
            "dir": "desc",
        }
        cards: list[dict[str, Any]] = []

        while url:
            await self._sleep(self.request_delay)
            try:
                page = await self.get_json(url, params)
            except NoResultsError:
                logger.debug("No cards matched %r", query)
                return cards

            page_cards = page.get("data")
            if isinstance(page_cards, list):
                cards.extend(page_cards)

            if len(cards) >= self.max_cards:
                break

            # next_page already carries the query string
            next_page = page.get("next_page")
            url = str(next_page) if page.get("has_more") and next_page else None
            params = None

        logger.debug("Scryfall query %r returned %d cards", query, len(cards))
        return cards
