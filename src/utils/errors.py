#!/usr/bin/env python3
"""
Error types raised by the rink stats engine.

Missing data is never an error here (it produces zero-state outputs);
these exceptions cover failures the caller has to decide about.
"""


class RinkStatsError(Exception):
    """Base class for engine errors."""


class EventStoreError(RinkStatsError):
    """An event collection could not be read from the event store."""


class AttendanceDataError(RinkStatsError):
    """Attendance data for a team could not be read."""

    def __init__(self, team_name: str, message: str):
        super().__init__(f"Attendance data unavailable for {team_name}: {message}")
        self.team_name = team_name


class ReportPublishError(RinkStatsError):
    """A rink report could not be persisted."""
