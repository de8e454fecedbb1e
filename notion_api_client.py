"""Notion REST API client for listing blocks and retrieving pages."""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter

logger = logging.getLogger('notion_markdown_sync.client')

# Child entries that are separate documents, never inlined into a page body.
NESTED_PAGE_TYPES = ('child_page', 'child_database')


class NotionApiClient:
    """Notion REST API client with bearer authentication and error logging."""

    def __init__(
        self,
        token: str,
        base_url: str = 'https://api.notion.com/v1',
        api_version: str = '2022-06-28',
        timeout: Optional[float] = None,
        page_size: int = 100
    ):
        """
        Initialize the client.

        Args:
            token: Notion integration token
            base_url: API root
            api_version: Value of the ``Notion-Version`` header
            timeout: HTTP request timeout in seconds (None waits indefinitely)
            page_size: Number of children requested per listing call
        """
        if not token:
            raise ValueError("Notion client requires an integration token")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.page_size = page_size

        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Notion-Version': api_version,
            'Content-Type': 'application/json',
        })

        # A failed call is final for that operation.
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"Initialized Notion client for {self.base_url} (version {api_version})")

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make an HTTP request to the Notion API.

        Raises:
            requests.exceptions.HTTPError: For HTTP errors
            requests.exceptions.RequestException: For other request errors
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        start_time = time.time()
        logger.debug(f"API Request: {method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            logger.debug(f"API Response: {response.status_code} {url} ({time.time() - start_time:.3f}s)")
            response.raise_for_status()
            return response

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error {status_code}: {method} {url}")

            if e.response is not None:
                try:
                    error_data = e.response.json()
                    logger.error(f"Error details: {json.dumps(error_data, indent=2)}")
                except ValueError:
                    logger.error(f"Error response: {e.response.text[:500]}")

            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {e}")
            raise

    def list_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        List every immediate child block of a block or page.

        Follows ``next_cursor`` until ``has_more`` is false.
        """
        children = []
        params: Dict[str, Any] = {'page_size': self.page_size}

        while True:
            response = self._make_request('GET', f'/blocks/{block_id}/children', params=params)
            data = response.json()

            children.extend(data.get('results', []))

            if not data.get('has_more') or not data.get('next_cursor'):
                break

            params = {'page_size': self.page_size, 'start_cursor': data['next_cursor']}

        logger.debug(f"Fetched {len(children)} children for block {block_id}")
        return children

    def get_page(self, page_id: str) -> Dict[str, Any]:
        """Retrieve a page object with its properties."""
        response = self._make_request('GET', f'/pages/{page_id}')
        return response.json()

    def get_block_tree(self, block_id: str) -> List[Dict[str, Any]]:
        """
        Fetch the content blocks of a page with nested children attached.

        Each block with ``has_children`` gets a ``children`` list. Nested pages
        and databases are returned as leaves.
        """
        blocks = self.list_children(block_id)
        for block in blocks:
            if block.get('has_children') and block.get('type') not in NESTED_PAGE_TYPES:
                block['children'] = self.get_block_tree(block['id'])
        return blocks

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'NotionApiClient':
        """Initialize client from a configuration dictionary."""
        notion_config = config.get('notion', {})
        advanced_config = config.get('advanced', {})

        return cls(
            token=notion_config.get('token'),
            base_url=notion_config.get('base_url', 'https://api.notion.com/v1'),
            api_version=notion_config.get('api_version', '2022-06-28'),
            timeout=advanced_config.get('request_timeout')
        )


__all__ = ['NotionApiClient', 'NESTED_PAGE_TYPES']
