"""Delivery channel that prints notifications to a terminal."""

from __future__ import annotations

import sys
from typing import TextIO

from ..errors import DeliveryError
from . import DeliveryChannel


class ConsoleChannel(DeliveryChannel):
    """Print each notification as one line on a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    async def deliver(self, title: str, body: str) -> None:
        stream = self._stream or sys.stdout
        try:
            print(f"🔔 {title}: {body}", file=stream, flush=True)
        except (OSError, ValueError) as e:
            raise DeliveryError(f"Could not write notification: {e}") from e
