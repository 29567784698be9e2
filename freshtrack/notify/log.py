"""Delivery channel that writes notifications to the log."""

from __future__ import annotations

import logging

from . import DeliveryChannel

logger = logging.getLogger(__name__)


class LogChannel(DeliveryChannel):
    async def deliver(self, title: str, body: str) -> None:
        logger.info("[%s] %s", title, body)
