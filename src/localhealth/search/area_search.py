"""
Area Search Client

Debounced, cancellable area lookup for keystroke-driven search boxes, plus the
best-match selection policy used when resolving an address to an area.
"""
import asyncio
from typing import Callable, List, Optional, Protocol

from config.settings import settings
from src.localhealth.utils.logger import get_logger
from src.localhealth.models.area import Area
from src.localhealth.scrapers.fingertips_client import ProviderRequestError

logger = get_logger(__name__)

AREA_SEARCH_FAILED_MESSAGE = "Couldn't fetch areas. Please try again."


class AreaSearchProvider(Protocol):
    async def search_areas(self, search_text: str) -> List[Area]:
        ...


class CancellationToken:
    """
    One-shot cancellation signal owned by a single search call.

    The client cancels the previous call's token whenever a new query arrives.
    """

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class AreaSearchClient:
    """
    Debounced area search with last-query-wins semantics.

    Each call to search() waits for the debounce delay, then queries the
    provider. A newer call cancels the older one at whichever stage it is in;
    a cancelled call returns an empty list and never touches `areas`.
    """

    def __init__(
        self,
        provider: AreaSearchProvider,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None,
        notify: Optional[Callable[[str], None]] = None
    ):
        """
        Initialize the search client.

        Args:
            provider: Object exposing `async search_areas(text)`
            debounce_seconds: Quiet period before a query is submitted
            min_query_length: Queries this long or shorter are not submitted
            notify: Callback receiving user-facing failure messages
        """
        self.provider = provider
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.min_query_length = (
            settings.search_min_query_length if min_query_length is None else min_query_length
        )
        self.notify = notify
        self.areas: List[Area] = []
        self._current_token: Optional[CancellationToken] = None

    def _supersede(self) -> CancellationToken:
        """Cancel the previous call and issue a token for the new one."""
        if self._current_token is not None:
            self._current_token.cancel()
        token = CancellationToken()
        self._current_token = token
        return token

    async def search(self, query_text: str) -> List[Area]:
        """
        Search areas for a query, honouring debounce and cancellation.

        Args:
            query_text: Text typed by the user

        Returns:
            Matching areas, or [] for short, superseded or failed queries
        """
        token = self._supersede()
        query = (query_text or "").strip()

        if len(query) <= self.min_query_length:
            self.areas = []
            return []

        if await self._cancelled_within(token, self.debounce_seconds):
            logger.debug("area_search_superseded", query=query, stage="debounce")
            return []

        request = asyncio.ensure_future(self.provider.search_areas(query))
        cancellation = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({request, cancellation}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancellation.cancel()
            if not request.done():
                request.cancel()

        if token.cancelled:
            _discard(request)
            logger.debug("area_search_superseded", query=query, stage="in_flight")
            return []

        try:
            areas = request.result()
        except ProviderRequestError as e:
            logger.warning("area_search_failed", query=query, error=str(e))
            self.areas = []
            self._notify(AREA_SEARCH_FAILED_MESSAGE)
            return []

        self.areas = areas
        return areas

    async def _cancelled_within(self, token: CancellationToken, delay: float) -> bool:
        """Wait up to `delay` seconds; True if the token was cancelled meanwhile."""
        try:
            await asyncio.wait_for(token.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    def _notify(self, message: str) -> None:
        if self.notify is not None:
            self.notify(message)


def _discard(request: asyncio.Future) -> None:
    """Drop a superseded request's outcome without applying it."""
    if request.done() and not request.cancelled():
        # retrieve so asyncio does not report an unhandled exception
        request.exception()


def select_best_area(candidates: List[Area], target_name: str) -> Optional[Area]:
    """
    Pick the area that best matches a locality name.

    Prefers an exact case-insensitive match on the full or short name, then
    falls back to the provider's first candidate.

    Args:
        candidates: Areas in provider order
        target_name: Locality extracted from an address

    Returns:
        Selected area, or None when there are no candidates
    """
    if not candidates:
        return None

    for area in candidates:
        if area.matches_name(target_name):
            return area

    logger.debug(
        "no_exact_area_match",
        target_name=target_name,
        fallback_area=candidates[0].code
    )
    return candidates[0]
