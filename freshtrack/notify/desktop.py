"""Desktop notifications using notify-send."""

from __future__ import annotations

import asyncio
import shutil
import subprocess

from ..errors import DeliveryError
from . import DeliveryChannel

_URGENCIES = ("low", "normal", "critical")


class DesktopChannel(DeliveryChannel):
    """Show notifications through the freedesktop ``notify-send`` command."""

    def __init__(self, app_name: str = "FreshTrack", urgency: str = "normal") -> None:
        if urgency not in _URGENCIES:
            raise ValueError(
                f"Unknown urgency: {urgency!r} (choose from low / normal / critical)"
            )
        self._app_name = app_name
        self._urgency = urgency

    async def deliver(self, title: str, body: str) -> None:
        await asyncio.to_thread(self._send, title, body)

    def _send(self, title: str, body: str) -> None:
        """Run notify-send.

        Raises:
            DeliveryError: If notify-send is not available or fails.
        """
        if shutil.which("notify-send") is None:
            raise DeliveryError(
                "notify-send command not found. Install libnotify:\n"
                "  Ubuntu/Debian: sudo apt install libnotify-bin\n"
                "  Fedora/RHEL:   sudo dnf install libnotify"
            )

        cmd = [
            "notify-send",
            "--app-name", self._app_name,
            "--urgency", self._urgency,
            title,
            body,
        ]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=10,
            )
        except subprocess.TimeoutExpired:
            raise DeliveryError("notify-send timed out.")
        except OSError as e:
            raise DeliveryError(f"Could not run notify-send: {e}") from e

        if result.returncode != 0:
            raise DeliveryError(
                f"notify-send failed: {result.stderr.strip()}"
            )
