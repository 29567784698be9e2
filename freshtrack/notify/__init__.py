"""Notification delivery channel base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import FreshTrackConfig


class DeliveryChannel(ABC):
    """Abstract base for handing a notification to the user."""

    @abstractmethod
    async def deliver(self, title: str, body: str) -> None:
        """Deliver one notification.

        Raises:
            DeliveryError: If the notification could not be delivered.
        """
        ...


def create_channel(config: FreshTrackConfig) -> DeliveryChannel:
    """Create a delivery channel based on configuration."""
    backend_name = config.notify.backend

    match backend_name:
        case "log":
            from .log import LogChannel

            return LogChannel()
        case "console":
            from .console import ConsoleChannel

            return ConsoleChannel()
        case "desktop":
            from .desktop import DesktopChannel

            return DesktopChannel(
                app_name=config.notify.desktop.app_name,
                urgency=config.notify.desktop.urgency,
            )
        case _:
            raise ValueError(
                f"Unknown notification backend: {backend_name!r} "
                f"(choose from log / console / desktop)"
            )


__all__ = ["DeliveryChannel", "create_channel"]
