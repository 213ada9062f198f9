import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.services.store import StoreUnavailableError

logger = logging.getLogger(__name__)


class ViewStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class ResultReady:
    result: Any


@dataclass
class LoadFailed:
    error: str


class ViewStateHolder:
    """Holds the state of one view while its data load is in flight.

    State changes only through ``deliver``. Once the view is dismissed,
    delivered messages are dropped and the state stays as it was.
    """

    def __init__(self, view: str):
        self.view = view
        self.status = ViewStatus.LOADING
        self.result: Any = None
        self.error: str | None = None
        self._dismissed = False

    @property
    def dismissed(self) -> bool:
        return self._dismissed

    def dismiss(self) -> None:
        self._dismissed = True

    def deliver(self, message: ResultReady | LoadFailed) -> bool:
        """Apply a load message. Returns False if the view was dismissed."""
        if self._dismissed:
            logger.info("Dropped %s for dismissed view '%s'", type(message).__name__, self.view)
            return False

        if isinstance(message, ResultReady):
            self.status = ViewStatus.READY
            self.result = message.result
            self.error = None
        else:
            self.status = ViewStatus.FAILED
            self.error = message.error
        return True


async def load_view(
    holder: ViewStateHolder,
    loader: Callable[[], Awaitable[Any]],
    timeout: float | None = None,
    is_dismissed: Callable[[], Awaitable[bool]] | None = None,
) -> ViewStateHolder:
    """
    Run ``loader`` and deliver its outcome to ``holder``.

    Store failures and timeouts become ``LoadFailed``; anything else
    propagates. ``is_dismissed`` is checked once the load finishes, before
    delivery.
    """
    try:
        result = await asyncio.wait_for(loader(), timeout=timeout)
    except StoreUnavailableError as exc:
        message: ResultReady | LoadFailed = LoadFailed(str(exc))
    except asyncio.TimeoutError:
        logger.error("Loading view '%s' timed out after %ss", holder.view, timeout)
        message = LoadFailed(f"Timed out after {timeout}s")
    else:
        message = ResultReady(result)

    if is_dismissed is not None and await is_dismissed():
        holder.dismiss()

    holder.deliver(message)
    return holder
