# engine/refresh.py

import asyncio
import logging
from typing import Optional

from core.errors import MarketDataError
from core.state_manager import RefreshState
from data.market import MarketDataClient
from data.prices import PriceBook

log = logging.getLogger(__name__)


class PriceRefresher:
    """
    Runs one price refresh cycle at a time.
    The blocking HTTP fetch happens in a worker thread; the PriceBook and the
    RefreshState are only touched on the event loop after the await returns.
    A timed-out fetch thread is not killed: it runs on until the client's own
    HTTP timeout, so a retry may briefly overlap it.
    """

    def __init__(self, client: MarketDataClient, price_book: PriceBook,
                 timeout: float = 15.0, limit: int = 100):
        self.client = client
        self.price_book = price_book
        self.timeout = timeout
        self.limit = limit
        self.state = RefreshState()
        self._task: Optional[asyncio.Task] = None

    def start(self) -> Optional[asyncio.Task]:
        """
        Kick off a refresh on the running loop and return its task.
        Returns None when a refresh is already loading; no second fetch is made.
        """
        loop = asyncio.get_running_loop()  # raises before any state changes
        if not self.state.begin():
            log.debug("Refresh already in flight, ignoring request")
            return None
        self._task = loop.create_task(self._run())
        self._task.add_done_callback(self._settle)
        return self._task

    async def refresh(self) -> str:
        """Start (or join) a refresh and wait for it to settle. Returns the final status."""
        task = self.start() or self._task
        if task is not None:
            await asyncio.wait({task})
        return self.state.status

    async def retry(self) -> str:
        return await self.refresh()

    def _settle(self, task: asyncio.Task):
        # a cycle cancelled before or during the fetch must still leave loading
        if task.cancelled():
            log.warning("Price refresh cancelled")
            self.state.fail("Price refresh cancelled")
        elif task.exception() is not None:
            self.state.fail(f"Unexpected error: {task.exception()}")

    async def _run(self):
        try:
            assets = await asyncio.wait_for(
                asyncio.to_thread(self.client.list_assets, self.limit),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            msg = f"Price refresh timed out after {self.timeout:g}s"
            log.warning(msg)
            self.state.fail(msg)
            return
        except MarketDataError as e:
            log.warning(f"Price refresh failed: {e}")
            self.state.fail(str(e))
            return
        except Exception as e:
            log.exception("Unexpected error during price refresh")
            self.state.fail(f"Unexpected error: {e}")
            return
        self.price_book.replace(assets)
        self.state.succeed()
        log.info(f"Prices refreshed for {len(assets)} assets")
