"""Fetchers package for discovering the Notion page tree."""

from .page_tree_fetcher import FetcherError, PageTreeFetcher

__all__ = [
    'FetcherError',
    'PageTreeFetcher'
]
