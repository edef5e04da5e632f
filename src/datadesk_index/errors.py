"""Exceptions raised by a projects refresh."""

from __future__ import annotations


class IndexRefreshError(Exception):
    """Base exception for refresh failures."""


class AuthenticationError(IndexRefreshError):
    """Raised when GitHub credentials are missing or rejected."""


class UpstreamUnavailable(IndexRefreshError):
    """
    Raised when the GitHub API cannot be reached or returns an error after
    the client's own retries.  Retrying the whole refresh later may succeed.
    """


class StorageWriteError(IndexRefreshError):
    """
    Raised when the projects database cannot be opened, written, or read.
    The previously committed table is left as it was.
    """
