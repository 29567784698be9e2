"""TOML configuration loader for FreshTrack."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_TITLE = "FreshTrack Reminder"
MAX_POLL_INTERVAL = 60


@dataclass
class SchedulerConfig:
    poll_interval: int = MAX_POLL_INTERVAL  # seconds between day-change checks


@dataclass
class DesktopNotifyConfig:
    app_name: str = "FreshTrack"
    urgency: str = "normal"  # low | normal | critical


@dataclass
class NotifyConfig:
    backend: str = "log"
    title: str = DEFAULT_TITLE
    desktop: DesktopNotifyConfig = field(default_factory=DesktopNotifyConfig)


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class FreshTrackConfig:
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> FreshTrackConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The notification backend and log level can be overridden via the
    ``FRESHTRACK_NOTIFY_BACKEND`` and ``FRESHTRACK_LOG_LEVEL`` environment
    variables.

    Raises:
        ValueError: If ``scheduler.poll_interval`` is outside 1..60 seconds
            or the log level is not a known logging level.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sch = raw.get("scheduler", {})
    ntf = raw.get("notify", {})
    log = raw.get("logging", {})
    desktop_cfg = ntf.get("desktop", {})

    poll_interval = int(sch.get("poll_interval", MAX_POLL_INTERVAL))
    if not 1 <= poll_interval <= MAX_POLL_INTERVAL:
        raise ValueError(
            f"scheduler.poll_interval must be between 1 and "
            f"{MAX_POLL_INTERVAL} seconds, got {poll_interval}"
        )

    # Resolve overrides: environment variable → config file → default
    backend = os.environ.get("FRESHTRACK_NOTIFY_BACKEND", "") or ntf.get(
        "backend", "log"
    )
    level = os.environ.get("FRESHTRACK_LOG_LEVEL", "") or log.get(
        "level", "INFO"
    )
    level = str(level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level!r}")

    return FreshTrackConfig(
        scheduler=SchedulerConfig(poll_interval=poll_interval),
        notify=NotifyConfig(
            backend=backend,
            title=ntf.get("title", DEFAULT_TITLE),
            desktop=DesktopNotifyConfig(
                app_name=desktop_cfg.get("app_name", "FreshTrack"),
                urgency=desktop_cfg.get("urgency", "normal"),
            ),
        ),
        logging=LoggingConfig(level=level),
    )
