"""Shared fixtures: a controllable clock and a recording delivery channel."""

from datetime import datetime, timedelta

import pytest

from freshtrack.errors import DeliveryError
from freshtrack.notify import DeliveryChannel


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.current += timedelta(days=days, hours=hours)


class RecordingChannel(DeliveryChannel):
    """Records deliveries; bodies listed in ``fail_on`` raise DeliveryError."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_on = fail_on or set()

    async def deliver(self, title: str, body: str) -> None:
        if body in self.fail_on:
            raise DeliveryError(f"channel down for {body!r}")
        self.sent.append((title, body))

    @property
    def bodies(self) -> list[str]:
        return [body for _, body in self.sent]


@pytest.fixture
def clock():
    # Mid-afternoon, so time-of-day handling is exercised
    return FakeClock(datetime(2025, 1, 10, 15, 30))


@pytest.fixture
def channel():
    return RecordingChannel()
