"""Async client for the Phayao Hub API with client-side session expiry."""

from .api import HubClient, HubClientError, SessionExpiredError

__all__ = ["HubClient", "HubClientError", "SessionExpiredError"]
