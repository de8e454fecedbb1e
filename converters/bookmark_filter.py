"""Turns standalone ``[bookmark](url)`` paragraphs into bookmark card HTML."""

import html
import logging
import re
from urllib.parse import urlparse

logger = logging.getLogger('notion_markdown_sync.converters.bookmark_filter')

# A paragraph made of nothing but a bookmark link.
BOOKMARK_PARAGRAPH = re.compile(r'^[ \t]*\[bookmark\]\(([^)\s]+)\)[ \t]*$', re.MULTILINE)

FAVICON_SERVICE = 'https://www.google.com/s2/favicons?domain={domain}&sz=32'

CARD_TEMPLATE = (
    '<a href="{url}" target="_blank" rel="noopener noreferrer" class="bookmark-card" data-url="{url}">'
    '<div class="bookmark-content"><div class="bookmark-text">'
    '<div class="bookmark-title">{url}</div>'
    '<div class="bookmark-description loading">Loading...</div>'
    '<div class="bookmark-link"><img src="{favicon}" alt="" class="bookmark-favicon">'
    '<span class="bookmark-domain">{domain}</span></div>'
    '</div><div class="bookmark-image" style="display: none;"><img src="" alt=""></div></div></a>'
)


def bookmark_domain(url: str) -> str:
    """Host of ``url`` without a leading ``www.``; the url itself if unparsable."""
    hostname = urlparse(url).hostname
    if not hostname:
        return url
    return hostname[4:] if hostname.startswith('www.') else hostname


def render_bookmark_card(url: str) -> str:
    domain = bookmark_domain(url)
    return CARD_TEMPLATE.format(
        url=html.escape(url, quote=True),
        domain=html.escape(domain),
        favicon=html.escape(FAVICON_SERVICE.format(domain=domain), quote=True)
    )


def render_bookmark_cards(markdown: str) -> str:
    """Replace every bookmark-only line with a bookmark card."""
    count = 0

    def replace(match):
        nonlocal count
        count += 1
        return render_bookmark_card(match.group(1))

    rendered = BOOKMARK_PARAGRAPH.sub(replace, markdown)
    if count:
        logger.debug(f"Rendered {count} bookmark card(s)")
    return rendered


__all__ = ['bookmark_domain', 'render_bookmark_card', 'render_bookmark_cards']
