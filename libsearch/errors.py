from __future__ import annotations

from typing import Optional


class LibrarySearchError(Exception):
    pass


class LoadFailure(LibrarySearchError):
    """A dataset could not be loaded: fetch error, non-success status, or no path configured."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationFailure(LibrarySearchError):
    """The search request is not acceptable as submitted."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
