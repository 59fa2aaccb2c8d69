"""Configurable fake scanner for development and testing.

Returns a preset payload, fails with a preset reason, or waits until the
read is cancelled, the way a camera left pointing at nothing would.
"""

import asyncio

from inventory.exceptions import ScanError
from inventory.scanning.port import BarcodeScanner


class FakeScanner(BarcodeScanner):
    """Scanner whose outcome is set up front."""

    def __init__(self, payload: str | None = None, failure_reason: str | None = None) -> None:
        self.payload = payload
        self.failure_reason = failure_reason
        self.reads: int = 0

    async def read(self) -> str:
        self.reads += 1
        if self.failure_reason is not None:
            raise ScanError(self.failure_reason)
        if self.payload is None:
            await asyncio.Event().wait()
        return self.payload
