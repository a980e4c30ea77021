"""Offline identity for launches; no account service is contacted."""

from .offline import DEFAULT_USERNAME, OfflineAuthenticator, OfflineProfile

__all__ = ["DEFAULT_USERNAME", "OfflineAuthenticator", "OfflineProfile"]
