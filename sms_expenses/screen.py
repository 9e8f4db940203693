"""State holder for the expenses screen.

Transitions:

    init -> requesting_permission -> permission_denied
                                  -> loading -> loaded
    permission_denied --retry--> requesting_permission
    loaded --refresh--> loading -> loaded
    loaded --retry, denied--> permission_denied (list cleared)
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .exceptions import ScreenStateError, SmsSourceError
from .models import ParsedTransaction, ScreenPhase, ScreenSnapshot, TransactionCard
from .services.permissions import PermissionGate
from .services.sms_parser import now_ms, parse_inbox
from .services.sms_source import SmsSource
from .services.view_filter import filter_transactions, render_card


logger = logging.getLogger(__name__)


@dataclass
class ScreenState:
    transactions: tuple[ParsedTransaction, ...] = ()
    loading: bool = False
    direction: str = "all"
    search: str = ""
    permission_granted: Optional[bool] = None
    phase: ScreenPhase = ScreenPhase.INIT
    fetch_error: Optional[str] = None
    fetched_at: Optional[datetime] = None


class ScreenController:
    def __init__(
        self,
        gate: PermissionGate,
        source: SmsSource,
        max_count: int = 1000,
        fetch_timeout: Optional[float] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.gate = gate
        self.source = source
        self.max_count = max_count
        self.fetch_timeout = fetch_timeout
        self.clock = clock
        self.state = ScreenState()
        self._fetch_lock = asyncio.Lock()

    async def mount(self) -> None:
        """Ask for permission once, then fetch if it was granted."""

        await self._request_and_fetch()

    async def retry_permission(self) -> bool:
        return await self._request_and_fetch()

    async def _request_and_fetch(self) -> bool:
        self.state.phase = ScreenPhase.REQUESTING_PERMISSION
        logger.info("[Screen] Requesting SMS permission")
        granted = await self.gate.request_permission()
        self.state.permission_granted = granted

        if not granted:
            self.state.phase = ScreenPhase.PERMISSION_DENIED
            self.state.transactions = ()
            self.state.fetch_error = None
            logger.info("[Screen] SMS permission denied")
            return False

        await self.fetch_messages()
        return True

    async def refresh(self) -> list[ParsedTransaction]:
        if self.state.permission_granted is not True:
            raise ScreenStateError("Cannot refresh messages without SMS permission")
        return await self.fetch_messages()

    async def _list_records(self) -> list[dict]:
        request = self.source.list_messages(box="inbox", max_count=self.max_count)
        if self.fetch_timeout is not None:
            result = await asyncio.wait_for(request, timeout=self.fetch_timeout)
        else:
            result = await request
        return result.records()

    async def fetch_messages(self) -> list[ParsedTransaction]:
        """Replace the transaction list with a fresh read of the inbox.

        A failing source empties the list and records ``fetch_error``.
        Fetches never overlap; a second caller waits for the first.
        Results are dropped if permission was denied while the fetch ran.
        """

        async with self._fetch_lock:
            self.state.loading = True
            self.state.phase = ScreenPhase.LOADING
            try:
                records = await self._list_records()
            except (SmsSourceError, asyncio.TimeoutError) as exc:
                error = str(exc) or "SMS fetch timed out"
                logger.error("[Screen] Failed to fetch SMS: %s", error)
                transactions = []
            else:
                error = None
                transactions = parse_inbox(records, now=self.clock())
            finally:
                self.state.loading = False

            if self.state.permission_granted is not True:
                logger.info("[Screen] Discarding fetch, SMS permission was denied meanwhile")
                return []

            self.state.transactions = tuple(transactions)
            self.state.fetch_error = error
            if error is None:
                self.state.fetched_at = datetime.now()
            self.state.phase = ScreenPhase.LOADED
            return transactions

    def set_direction(self, direction: str) -> None:
        self.state.direction = direction

    def set_search(self, query: str) -> None:
        self.state.search = query

    def visible(self, direction: Optional[str] = None, search: Optional[str] = None) -> list[ParsedTransaction]:
        return filter_transactions(
            self.state.transactions,
            self.state.direction if direction is None else direction,
            self.state.search if search is None else search,
        )

    def cards(self) -> list[TransactionCard]:
        return [render_card(transaction) for transaction in self.visible()]

    @property
    def show_loading(self) -> bool:
        # An undetermined permission renders as loading, not as a denial
        return self.state.loading or self.state.permission_granted is None

    def snapshot(self) -> ScreenSnapshot:
        cards = self.cards()
        return ScreenSnapshot(
            phase=self.state.phase,
            permission_granted=self.state.permission_granted,
            loading=self.show_loading,
            direction=self.state.direction,
            search=self.state.search,
            total_count=len(self.state.transactions),
            visible_count=len(cards),
            fetch_error=self.state.fetch_error,
            fetched_at=self.state.fetched_at,
            cards=cards,
        )
