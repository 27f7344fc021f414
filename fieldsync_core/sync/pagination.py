# =============================================================================
# fieldsync_core/sync/pagination.py
# Offset-based paginated loading of remote collections
# =============================================================================
"""
PaginatedCollectionLoader - page-indexed fetches of a bounded-size collection.

State machine: Idle -> Loading -> {Loaded, Failed}. Only load() changes
state. A newer load() supersedes any in-flight one: whichever call was
issued last decides the final state, whatever order the responses arrive in.
"""

from __future__ import annotations
import threading
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from fieldsync_core.errors import ClientError
from fieldsync_core.logging import get_logger
from fieldsync_core.models.records import CollectionPage, clamp_page

logger = get_logger(__name__)

T = TypeVar("T")


class LoadStatus(Enum):
    """Loader lifecycle states."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class PaginatedCollectionLoader(Generic[T]):
    """
    Loads one page at a time from a list endpoint returning {data, total}.

    Usage:
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)
        loader.load(1)
        loader.next_page()
        page = loader.state
    """

    def __init__(
        self,
        client,
        path: str,
        page_size: int = 25,
        item_factory: Optional[Callable[[Dict[str, Any]], T]] = None,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._client = client
        self._path = path
        self._item_factory = item_factory
        self._lock = threading.Lock()
        self._generation = 0
        self._status = LoadStatus.IDLE
        self._state: CollectionPage[T] = CollectionPage(page_size=page_size)

    @property
    def state(self) -> CollectionPage[T]:
        """Current immutable page snapshot."""
        return self._state

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def page_size(self) -> int:
        return self._state.page_size

    def load(self, page: int) -> bool:
        """
        Fetch the given page.

        A page past the end of the collection, as reported by the response,
        is fetched again at the last page, so items always match page.

        Returns:
            True if this call's result was applied, False if the fetch failed
            or a newer load() superseded it
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            page = max(1, int(page))
            if self._state.total > 0:
                page = clamp_page(page, self._state.total, self._state.page_size)
            self._status = LoadStatus.LOADING
            self._state = self._state.evolve(loading=True, error=None)

        page_size = self._state.page_size

        try:
            items, total = self._fetch(page, page_size)
            last_page = clamp_page(page, total, page_size)
            if last_page != page:
                if generation != self._generation:
                    return False
                logger.debug(f"Page {page} is past the end of {self._path}; loading page {last_page}")
                page = last_page
                items, total = self._fetch(page, page_size)
        except ClientError as e:
            return self._apply_failure(generation, e.message)
        except (TypeError, ValueError, KeyError) as e:
            logger.error(f"Malformed page from {self._path}: {e}")
            return self._apply_failure(generation, f"Malformed response: {e}")

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding superseded result for page {page}")
                return False
            self._state = CollectionPage(
                items=items,
                page=page,
                page_size=page_size,
                total=total,
                loading=False,
                error=None,
            )
            self._status = LoadStatus.LOADED
        return True

    def _fetch(self, page: int, page_size: int) -> Tuple[Tuple[T, ...], int]:
        offset = (page - 1) * page_size
        logger.debug(f"Loading {self._path} page {page} (offset {offset})")
        payload = self._client.call(
            "GET",
            self._path,
            params={"limit": page_size, "offset": offset},
        )
        items = tuple(self._build_items(payload.get("data") or [])[:page_size])
        total = self._parse_total(payload.get("total"), offset + len(items))
        return items, total

    def next_page(self) -> bool:
        """Load the following page; no-op at the last page."""
        current = self._state
        target = clamp_page(current.page + 1, current.total, current.page_size)
        if target == current.page:
            return False
        return self.load(target)

    def prev_page(self) -> bool:
        """Load the preceding page; no-op at page 1."""
        current = self._state
        target = clamp_page(current.page - 1, current.total, current.page_size)
        if target == current.page:
            return False
        return self.load(target)

    def refresh(self) -> bool:
        """Reload the current page."""
        return self.load(self._state.page)

    def _apply_failure(self, generation: int, message: str) -> bool:
        with self._lock:
            if generation != self._generation:
                return False
            # Stale items stay visible next to the error
            self._state = self._state.evolve(loading=False, error=message)
            self._status = LoadStatus.FAILED
        logger.warning(f"Loading {self._path} failed: {message}")
        return False

    def _build_items(self, raw_items):
        if not isinstance(raw_items, list):
            raise TypeError("'data' must be a list")
        if self._item_factory is None:
            return list(raw_items)
        return [self._item_factory(item) for item in raw_items]

    @staticmethod
    def _parse_total(raw: Any, fallback: int) -> int:
        if raw is None:
            return fallback
        return max(0, int(raw))
