"""
Per-user stock list view state.

A StockListSession is a read-through cache of the user's stocks plus the
active search query and a busy flag:

  - The cached set is loaded from the store on first read and replaced
    wholesale after every successful write; it is never merged.
  - The visible set is the cached set filtered by the query, recomputed
    on every access.
  - Writes (form submit, spreadsheet import) hold the busy flag. A write
    attempted while busy is refused without doing any work. The flag is
    released on every path.

All handlers touching a session run on the event loop, so the only
suspension point inside a write is the awaited upload read.
"""
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, Optional
import logging

from toystock.core.exceptions import ImportInProgressError, StoreError
from toystock.models.stock import StockRecord
from toystock.models.user import UserContext
from toystock.schemas.stock import ImportResult, StockCreate
from toystock.services.search import filter_stocks
from toystock.services.stock_service import StockService

logger = logging.getLogger(__name__)


class StockListSession:
    """Cached stock list, search query and busy flag for one user."""

    def __init__(self, user: UserContext) -> None:
        self.user = user
        self.query = ""
        self.busy = False
        self._records: Optional[list[StockRecord]] = None

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    @property
    def can_submit(self) -> bool:
        return not self.busy

    @property
    def records(self) -> list[StockRecord]:
        return list(self._records or [])

    @property
    def visible(self) -> list[StockRecord]:
        return filter_stocks(self._records or [], self.query)

    def set_query(self, query: Optional[str]) -> None:
        self.query = query or ""

    def ensure_loaded(self, service: StockService) -> list[StockRecord]:
        """Return the cached set, fetching it from the store when invalid."""
        if self._records is None:
            logger.info("Loading stock list user_id=%s", self.user.id)
            self._records = service.list_stocks(self.user)
        return self._records

    def invalidate(self) -> None:
        self._records = None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @contextmanager
    def _writing(self) -> Iterator[None]:
        if self.busy:
            logger.warning("Write refused, session busy user_id=%s", self.user.id)
            raise ImportInProgressError()
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    def _after_write(self, service: StockService) -> None:
        self.invalidate()
        try:
            self.ensure_loaded(service)
        except StoreError:
            # The write itself succeeded; the next read retries the fetch.
            logger.warning("Refetch after write failed user_id=%s", self.user.id, exc_info=True)

    def create(self, service: StockService, data: StockCreate) -> StockRecord:
        """Submit one stock from the form and refresh the cached set."""
        with self._writing():
            record = service.create_stock(data, self.user)
            self._after_write(service)
        return record

    async def import_upload(
        self,
        service: StockService,
        filename: Optional[str],
        read: Callable[[], Awaitable[bytes]],
    ) -> ImportResult:
        """Read an uploaded spreadsheet, import it and refresh the cached set."""
        with self._writing():
            content = await read()
            result = service.import_spreadsheet(filename, content, self.user)
            self._after_write(service)
        return result


class SessionRegistry:
    """Process-wide map of user id to StockListSession."""

    def __init__(self) -> None:
        self._sessions: dict[str, StockListSession] = {}

    def get(self, user: UserContext) -> StockListSession:
        session = self._sessions.get(user.id)
        if session is None:
            logger.trace("Creating stock list session user_id=%s", user.id)
            session = self._sessions[user.id] = StockListSession(user)
        return session

    def clear(self) -> None:
        self._sessions.clear()


sessions = SessionRegistry()
