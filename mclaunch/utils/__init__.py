"""Common utilities."""

from .fetcher import Fetcher, AiohttpFetcher, Aria2cFetcher, select_fetcher
from .logger import setup_logging

__all__ = ["Fetcher", "AiohttpFetcher", "Aria2cFetcher", "select_fetcher", "setup_logging"]
