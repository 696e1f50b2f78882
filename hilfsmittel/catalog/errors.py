"""
Catalog error types.

Only the network path raises. Callers distinguish UpstreamUnavailableError
(show a retry affordance) from an empty SearchResult (ask the user to
broaden their answers).
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog retrieval errors."""


class TransportError(CatalogError):
    """A single upstream request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamUnavailableError(CatalogError):
    """Retries exhausted and no cached payload to fall back on."""

    def __init__(self, path: str, attempts: int):
        super().__init__(
            f"Upstream catalog unavailable: {path} failed after {attempts} attempts"
        )
        self.path = path
        self.attempts = attempts
