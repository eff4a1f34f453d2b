"""Errors raised while talking to the directions provider."""

from __future__ import annotations


class DirectionsError(Exception):
    """The directions provider could not produce a route for a waypoint sequence."""

    def __init__(self, status: str, message: str = "") -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}" if message else status)


class DirectPathUnavailable(DirectionsError):
    """The mandatory direct start-to-end route could not be obtained."""


class CandidateUnavailable(DirectionsError):
    """A detour candidate failed; the search skips it and moves on."""


class ServiceNotConfigured(RuntimeError):
    """A required external service (API key, endpoint) is missing from settings."""
