"""Exception types raised by the FreshTrack core."""

from __future__ import annotations


class FreshTrackError(Exception):
    """Base class for FreshTrack errors."""


class ParseError(FreshTrackError, ValueError):
    """The scanned payload is empty or not valid JSON.

    Aborts the whole scan; per-item problems are reported as
    :class:`~freshtrack.scan.models.InvalidItem` instead.
    """


class DeliveryError(FreshTrackError, RuntimeError):
    """A notification could not be handed to the delivery channel."""
