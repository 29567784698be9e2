"""Tests for notification delivery channels."""

import io
import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from freshtrack.config import load_config
from freshtrack.errors import DeliveryError
from freshtrack.notify import DeliveryChannel, create_channel
from freshtrack.notify.console import ConsoleChannel
from freshtrack.notify.desktop import DesktopChannel
from freshtrack.notify.log import LogChannel


class TestCreateChannel:
    def test_create_log_channel(self):
        config = load_config()
        assert isinstance(create_channel(config), LogChannel)

    def test_create_console_channel(self):
        config = load_config()
        config.notify.backend = "console"
        assert isinstance(create_channel(config), ConsoleChannel)

    def test_create_desktop_channel(self):
        config = load_config()
        config.notify.backend = "desktop"
        channel = create_channel(config)
        assert isinstance(channel, DesktopChannel)
        assert isinstance(channel, DeliveryChannel)

    def test_create_unknown_channel(self):
        config = load_config()
        config.notify.backend = "pager"
        with pytest.raises(ValueError, match="Unknown notification backend"):
            create_channel(config)


class TestLogChannel:
    @pytest.mark.asyncio
    async def test_logs_notification(self, caplog):
        caplog.set_level(logging.INFO, logger="freshtrack.notify.log")
        await LogChannel().deliver("FreshTrack Reminder", "Milk expires today!")
        assert "[FreshTrack Reminder] Milk expires today!" in caplog.text


class TestConsoleChannel:
    @pytest.mark.asyncio
    async def test_prints_line(self):
        stream = io.StringIO()
        await ConsoleChannel(stream).deliver("Reminder", "Milk has expired!")
        assert stream.getvalue() == "🔔 Reminder: Milk has expired!\n"

    @pytest.mark.asyncio
    async def test_closed_stream_raises_delivery_error(self):
        stream = io.StringIO()
        stream.close()
        with pytest.raises(DeliveryError):
            await ConsoleChannel(stream).deliver("Reminder", "Milk has expired!")


class TestDesktopChannel:
    def test_rejects_unknown_urgency(self):
        with pytest.raises(ValueError, match="urgency"):
            DesktopChannel(urgency="urgent")

    @pytest.mark.asyncio
    async def test_no_notify_send(self):
        with patch("shutil.which", return_value=None):
            with pytest.raises(DeliveryError, match="notify-send"):
                await DesktopChannel().deliver("Reminder", "Milk expires today!")

    @pytest.mark.asyncio
    async def test_sends_notification(self):
        ok = MagicMock(returncode=0, stderr="")
        with patch("shutil.which", return_value="/usr/bin/notify-send"):
            with patch("subprocess.run", return_value=ok) as mock_run:
                await DesktopChannel(app_name="Fridge", urgency="critical").deliver(
                    "Reminder", "Milk expires today!"
                )

        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "notify-send",
            "--app-name", "Fridge",
            "--urgency", "critical",
            "Reminder",
            "Milk expires today!",
        ]

    @pytest.mark.asyncio
    async def test_failure_raises_delivery_error(self):
        failed = MagicMock(returncode=1, stderr="no display\n")
        with patch("shutil.which", return_value="/usr/bin/notify-send"):
            with patch("subprocess.run", return_value=failed):
                with pytest.raises(DeliveryError, match="no display"):
                    await DesktopChannel().deliver("Reminder", "Milk expires today!")

    @pytest.mark.asyncio
    async def test_timeout_raises_delivery_error(self):
        with patch("shutil.which", return_value="/usr/bin/notify-send"):
            with patch(
                "subprocess.run",
                side_effect=subprocess.TimeoutExpired("notify-send", 10),
            ):
                with pytest.raises(DeliveryError, match="timed out"):
                    await DesktopChannel().deliver("Reminder", "Milk expires today!")
