"""Scan tasks and routing of decoded payloads.

A scan runs as a one-shot asyncio task and resolves to a ``ScanResult``.
The payload is then handed to ``dispatch_scan``, which is synchronous and
goes through the same operations as typed-in input, so a late scan never
mutates the workspace from inside the scanner's own task.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

from inventory.cart.items import add_to_cart_by_sku
from inventory.exceptions import ScanError

logger = structlog.get_logger(__name__)


class ScanTarget(Enum):
    CATALOG_FORM = "catalog-form"
    CATALOG_SEARCH = "catalog-search"
    POINT_OF_SALE = "point-of-sale"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan: a payload or the reason there is none."""

    target: ScanTarget
    payload: str | None = None
    error: ScanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.payload)


class ScanTask:
    """A single scan bound to a target. Start once, await once, cancel any time."""

    def __init__(self, scanner, target) -> None:
        self.scanner = scanner
        self.target = ScanTarget(target)
        self._task: asyncio.Task | None = None
        self._cancel_requested = False

    def start(self) -> "ScanTask":
        if self._task is not None:
            raise ScanError("Scan already started", target=self.target.value)
        self._task = asyncio.create_task(self.scanner.read())
        return self

    def cancel(self) -> None:
        self._cancel_requested = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def result(self) -> ScanResult:
        if self._task is None:
            self.start()

        try:
            payload = await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            return ScanResult(self.target, error=ScanError("Scan cancelled", target=self.target.value))
        except ScanError as exc:
            return ScanResult(self.target, error=exc)

        payload = (payload or "").strip()
        if not payload:
            return ScanResult(self.target, error=ScanError("Scanner returned no payload", target=self.target.value))
        return ScanResult(self.target, payload=payload)


def dispatch_scan(workspace, target, payload):
    """Route a decoded payload to where the scan was started from.

    Point-of-sale scans add the matching product to the cart and return it;
    unknown SKUs raise ``NotFound``.
    """
    target = ScanTarget(target)
    logger.info("Scan received", target=target.value, payload=payload)

    if target is ScanTarget.CATALOG_FORM:
        workspace.form["sku"] = payload
        return None
    if target is ScanTarget.CATALOG_SEARCH:
        workspace.search_term = payload
        return None
    return add_to_cart_by_sku(workspace, payload)
