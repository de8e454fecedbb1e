"""Downloads images referenced by a page into a per-page local directory."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse

import requests

REDIRECT_STATUSES = (301, 302, 303, 307, 308)
DEFAULT_EXTENSION = '.png'
CHUNK_SIZE = 64 * 1024


class AssetDownloadError(Exception):
    """Raised when an image cannot be materialized locally."""
    pass


class AssetMaterializer:
    """
    Downloads remote images into ``<images_dir>/<owner_id>/image-<n><ext>``.

    Redirects are followed by hand so the hop count is bounded and a URL that
    comes back around is rejected instead of looping. Every call re-downloads
    and overwrites; there is no existence check.
    """

    def __init__(
        self,
        images_dir: Path,
        url_prefix: str = '/images/notion',
        max_redirects: int = 5,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the materializer.

        Args:
            images_dir: Filesystem root for downloaded images
            url_prefix: Published site path that maps to ``images_dir``
            max_redirects: Redirect hops allowed per image
            timeout: HTTP request timeout in seconds (None waits indefinitely)
            session: Optional requests session; image URLs are pre-signed and
                must not receive the Notion Authorization header
            logger: Logger instance
        """
        self.images_dir = Path(images_dir)
        self.url_prefix = url_prefix.rstrip('/')
        self.max_redirects = max_redirects
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger('notion_markdown_sync.exporters.asset_materializer')

        self.stats = {
            'downloaded': 0,
            'failed': 0,
            'total_size_bytes': 0
        }

    def fetch(self, url: str, owner_id: str, asset_index: int) -> str:
        """
        Download ``url`` as the ``asset_index``-th image of ``owner_id``.

        Returns:
            Site path of the saved file

        Raises:
            AssetDownloadError: On redirect loops or too many redirects
            requests.exceptions.RequestException: On network or HTTP errors
            OSError: On filesystem errors
        """
        file_name = f"image-{asset_index}{self._extension_for(url)}"
        page_dir = self.images_dir / owner_id
        file_path = page_dir / file_name

        try:
            page_dir.mkdir(parents=True, exist_ok=True)
            response = self._open_following_redirects(url)
            with response:
                response.raise_for_status()
                size = self._stream_to_file(response, file_path)
        except Exception:
            self.stats['failed'] += 1
            raise

        self.stats['downloaded'] += 1
        self.stats['total_size_bytes'] += size
        self.logger.debug(f"Saved image {url} -> {file_path} ({size} bytes)")

        return f"{self.url_prefix}/{owner_id}/{file_name}"

    def _open_following_redirects(self, url: str) -> requests.Response:
        visited = {url}
        current_url = url

        for _ in range(self.max_redirects + 1):
            response = self.session.get(
                current_url,
                stream=True,
                allow_redirects=False,
                timeout=self.timeout
            )

            if response.status_code not in REDIRECT_STATUSES:
                return response

            location = response.headers.get('Location')
            response.close()
            if not location:
                raise AssetDownloadError(
                    f"Redirect {response.status_code} without Location header: {current_url}"
                )

            next_url = urljoin(current_url, location)
            if next_url in visited:
                raise AssetDownloadError(f"Redirect loop detected at {next_url} (from {url})")

            self.logger.debug(f"Following redirect {response.status_code}: {current_url} -> {next_url}")
            visited.add(next_url)
            current_url = next_url

        raise AssetDownloadError(f"Too many redirects (>{self.max_redirects}) for {url}")

    def _stream_to_file(self, response: requests.Response, file_path: Path) -> int:
        size = 0
        try:
            with open(file_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        size += len(chunk)
        except Exception:
            file_path.unlink(missing_ok=True)
            raise
        return size

    @staticmethod
    def _extension_for(url: str) -> str:
        ext = os.path.splitext(urlparse(url).path)[1]
        return ext or DEFAULT_EXTENSION

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()

    @classmethod
    def from_config(cls, config: Dict[str, Any], logger: Optional[logging.Logger] = None) -> 'AssetMaterializer':
        export_config = config.get('export', {})
        return cls(
            images_dir=Path(export_config.get('images_directory', 'public/images/notion')),
            url_prefix=export_config.get('image_url_prefix', '/images/notion'),
            max_redirects=export_config.get('max_image_redirects', 5),
            timeout=config.get('advanced', {}).get('request_timeout'),
            logger=logger
        )


__all__ = ['AssetDownloadError', 'AssetMaterializer', 'REDIRECT_STATUSES']
