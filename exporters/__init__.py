"""Markdown export package for the Notion sync pipeline.

Package Structure:
- markdown_exporter: writes one markdown document per discovered page
- frontmatter: header field assembly and YAML serialization
- slug_registry: per-run unique slugs derived from page titles
- asset_materializer: downloads page images into per-page directories

Configuration Referenced:
- export.content_directory: where documents are written
- export.images_directory / export.image_url_prefix: image storage and published path
- export.description_length: description truncation length
- export.max_image_redirects: redirect hop limit for image downloads
"""

from .asset_materializer import AssetDownloadError, AssetMaterializer
from .frontmatter import build_frontmatter, dump_frontmatter, render_document
from .markdown_exporter import MarkdownExporter
from .slug_registry import SlugRegistry, normalize_slug

__all__ = [
    'AssetDownloadError',
    'AssetMaterializer',
    'MarkdownExporter',
    'SlugRegistry',
    'build_frontmatter',
    'dump_frontmatter',
    'normalize_slug',
    'render_document'
]
