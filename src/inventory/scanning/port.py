"""Barcode scanner port (abstract interface).

A scanner produces one decoded string per ``read`` call, or raises
``ScanError`` when it cannot (no camera, unsupported device, nothing read).
Reads may take arbitrarily long; callers cancel them through ``ScanTask``.
"""

from abc import ABC, abstractmethod


class BarcodeScanner(ABC):
    """Abstract barcode capture device."""

    @abstractmethod
    async def read(self) -> str:
        """Wait for one barcode and return its decoded payload."""
        ...
