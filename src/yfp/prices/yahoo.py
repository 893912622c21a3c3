"""Yahoo Finance quote history: request composition and page download.

The history page is plain HTML; the table it carries is handed to
``HistoryTableParser``. Requests go through httpx with an aiolimiter token
bucket and a small retry policy for throttling and server errors.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from urllib.parse import quote

import httpx
from aiolimiter import AsyncLimiter

from yfp.core.config import HttpConfig
from yfp.core.exceptions import FetchError, RateLimitError
from yfp.prices.dates import format_canonical, parse_canonical_date, to_human_phrase
from yfp.prices.models import HistoryQuery, PriceBar
from yfp.prices.parser import HistoryTableParser

logger = logging.getLogger(__name__)

_HISTORY_PATH = "/quote/{ticker}/history"
_DEFAULT_RETRY_AFTER = 5
_RETRYABLE_SERVER_CODES = (500, 502, 503)


@dataclass(frozen=True)
class HistoryRequest:
    """A fully composed GET request for one history page."""

    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


def compose_request(
    query: HistoryQuery,
    config: HttpConfig | None = None,
    today: date | None = None,
) -> HistoryRequest:
    """Build the history page request for a query.

    ``period1``/``period2`` are the UTC-midnight epochs of the bounds; a
    missing end falls back to ``today`` (local calendar date by default).

    Raises:
        DateParseError: If a bound is not "YYYY-MM-DD".
    """
    config = config or HttpConfig()
    end = query.end if query.end is not None else format_canonical(today or date.today())

    logger.info(
        "Getting historical data for %s from %s until %s on %s frequency",
        query.ticker,
        to_human_phrase(query.start),
        to_human_phrase(end),
        query.frequency,
    )

    path = _HISTORY_PATH.format(ticker=quote(query.ticker, safe=""))
    return HistoryRequest(
        url=f"{config.base_url}{path}",
        params={
            "period1": str(parse_canonical_date(query.start)),
            "period2": str(parse_canonical_date(end)),
            "frequency": query.frequency.wire_code,
        },
        headers={"User-Agent": config.user_agent},
    )


class YahooHistoryClient:
    """Async client that downloads and parses quote history pages.

    Use via ``async with YahooHistoryClient(config) as client:``.

    Args:
        config: HTTP settings. Defaults to ``HttpConfig()``.
        parser: Table parser. Defaults to one sharing this client's clock.
        today: Clock for open-ended queries.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        parser: HistoryTableParser | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._config = config or HttpConfig()
        self._today = today
        self._parser = parser or HistoryTableParser(today=today)
        self._limiter = AsyncLimiter(max_rate=self._config.rate_limit, time_period=1.0)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.request_timeout),
            follow_redirects=True,
        )

    async def __aenter__(self) -> YahooHistoryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._client.aclose()

    async def fetch_html(self, query: HistoryQuery) -> str:
        """Download the raw history page for a query.

        Raises:
            FetchError: Network failure or a non-retryable HTTP status.
            RateLimitError: HTTP 429 persisted through all retries.
        """
        request = compose_request(query, self._config, today=self._today())
        response = await self._send(request)
        return response.text

    async def get_history(self, query: HistoryQuery) -> list[PriceBar]:
        """Download a history page and extract its price bars.

        Raises:
            FetchError: See ``fetch_html``.
            MissingTableError: The page carried no price table.
        """
        raw = await self.fetch_html(query)
        bars = self._parser.parse(raw, query.frequency, query.start, query.end)
        logger.info("Parsed %d %s bars for %s", len(bars), query.frequency, query.ticker)
        return bars

    async def _send(self, request: HistoryRequest) -> httpx.Response:
        """Execute a GET with rate limiting and retry logic.

        Retry policy (up to ``max_retries`` extra attempts):
            - HTTP 429: wait for Retry-After (or 5s), then retry.
            - HTTP 500/502/503: exponential backoff from ``retry_backoff``.
            - Connection errors: retry after ``2 * retry_backoff`` seconds.
            - Any other non-200 status: raise immediately.
        """
        retries = self._config.max_retries
        backoff = self._config.retry_backoff
        url = request.url

        for attempt in range(retries + 1):
            can_retry = attempt < retries
            try:
                async with self._limiter:
                    response = await self._client.get(
                        url, params=request.params, headers=request.headers
                    )
            except httpx.TransportError as e:
                if can_retry:
                    logger.warning(
                        "Connection error on %s: %s (attempt %d/%d)",
                        url, e, attempt + 1, retries,
                    )
                    await asyncio.sleep(2 * backoff)
                    continue
                raise FetchError(
                    f"Connection failed after retries: {url}",
                    context={"url": url, "error": str(e)},
                ) from e

            status = response.status_code
            if status == 200:
                return response

            if status == 429:
                retry_after = _retry_after_seconds(response)
                if can_retry:
                    logger.warning(
                        "Rate limited (429) on %s, waiting %ds (attempt %d/%d)",
                        url, retry_after, attempt + 1, retries,
                    )
                    await asyncio.sleep(retry_after)
                    continue
                raise RateLimitError(
                    f"Rate limit exceeded after {retries} retries: {url}",
                    context={"url": url, "status_code": status, "retry_after": retry_after},
                )

            if status in _RETRYABLE_SERVER_CODES and can_retry:
                delay = backoff * 2**attempt
                logger.warning(
                    "Server error %d on %s, retrying in %.1fs (attempt %d/%d)",
                    status, url, delay, attempt + 1, retries,
                )
                await asyncio.sleep(delay)
                continue

            raise FetchError(
                f"HTTP {status} from {url}",
                context={"url": url, "status_code": status},
            )

        raise FetchError(f"Request failed after all retries: {url}", context={"url": url})


def _retry_after_seconds(response: httpx.Response) -> int:
    try:
        return max(int(response.headers.get("Retry-After", _DEFAULT_RETRY_AFTER)), 0)
    except ValueError:
        return _DEFAULT_RETRY_AFTER


async def retrieve_history(
    query: HistoryQuery,
    config: HttpConfig | None = None,
) -> list[PriceBar]:
    """One-shot fetch and parse with a throwaway client."""
    async with YahooHistoryClient(config) as client:
        return await client.get_history(query)
