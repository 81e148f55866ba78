"""
Exception hierarchy for manifest and registry failures.
"""

from __future__ import annotations

from typing import Optional


class MaintenanceScoreError(Exception):
    """Base error for the maintenance score tool."""


class ManifestError(MaintenanceScoreError):
    """The project manifest could not be located or read. Fatal for the run."""

    def __init__(self, message: str, manifest_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.manifest_path = manifest_path


class FetchError(MaintenanceScoreError):
    """A registry lookup for a single dependency failed."""

    def __init__(self, message: str, dependency: Optional[str] = None) -> None:
        super().__init__(message)
        self.dependency = dependency


class NotFoundError(FetchError):
    """The registry has no record for the dependency."""

    def __init__(self, dependency: Optional[str] = None) -> None:
        super().__init__("not found", dependency=dependency)


class HttpError(FetchError):
    """The registry answered with a non-success status other than 404."""

    def __init__(self, status_code: int, dependency: Optional[str] = None) -> None:
        super().__init__(f"http {status_code}", dependency=dependency)
        self.status_code = status_code


class TransportError(FetchError):
    """Connection, DNS or timeout failure before a response was received."""


class ParseError(FetchError):
    """The registry response body or its timestamp could not be parsed."""
