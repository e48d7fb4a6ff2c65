"""Typed failures raised by the community forecast engine."""

from __future__ import annotations


class CommunityEngineError(ValueError):
    """Base class for deterministic input failures inside the engine."""


class InvalidHistoricalData(CommunityEngineError):
    """Historical aggregates cannot be turned into a forecast."""


class MalformedForecast(CommunityEngineError):
    """A forecast sequence is not 24 ordered, gap-free hourly points."""
