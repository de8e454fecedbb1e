"""Data models for the Notion to Markdown sync pipeline."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger('notion_markdown_sync')

TITLE_PROPERTY_ALIASES = ('title', 'Title', 'Name')
UNTITLED = 'Untitled'


def extract_title(properties: Dict[str, Any]) -> str:
    """
    Read a page title from its Notion properties.

    The first alias present wins. Rich text segments are joined so a title
    with mixed formatting is not truncated to its first run.
    """
    for alias in TITLE_PROPERTY_ALIASES:
        prop = properties.get(alias)
        if not prop:
            continue
        if prop.get('type') != 'title':
            return UNTITLED
        title = ''.join(segment.get('plain_text', '') for segment in prop.get('title') or [])
        return title or UNTITLED
    return UNTITLED


def compact_id(notion_id: str) -> str:
    """Strip the hyphens from a Notion UUID."""
    return notion_id.replace('-', '')


@dataclass(frozen=True)
class NotionPage:
    """Snapshot of a Notion page fetched once per sync run."""

    id: str
    title: str
    last_edited_time: str
    properties: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    url: Optional[str] = None

    @property
    def compact_id(self) -> str:
        return compact_id(self.id)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'NotionPage':
        """Build a page from a ``GET /pages/{id}`` payload."""
        properties = data.get('properties') or {}
        return cls(
            id=data['id'],
            title=extract_title(properties),
            last_edited_time=data.get('last_edited_time', ''),
            properties=properties,
            url=data.get('url')
        )


@dataclass(frozen=True)
class PageRecord:
    """A discovered page plus the position it was found at in the tree."""

    page: NotionPage
    parent_id: Optional[str]
    parent_title: Optional[str]
    hierarchy: Tuple[str, ...]
    tags: Tuple[str, ...]
    level: int

    @property
    def id(self) -> str:
        return self.page.id

    @property
    def title(self) -> str:
        return self.page.title


@dataclass(frozen=True)
class AncestorContext:
    """
    Immutable traversal context handed from a page to its children.

    The root context has no id of its own in the output: its children get
    level 0, no parent and a hierarchy containing only themselves.
    """

    id: Optional[str] = None
    title: Optional[str] = None
    hierarchy: Tuple[str, ...] = ()
    level: int = 0

    def child_record(self, page: NotionPage) -> PageRecord:
        return PageRecord(
            page=page,
            parent_id=self.id,
            parent_title=self.title,
            hierarchy=self.hierarchy + (page.title,),
            tags=self.hierarchy,
            level=self.level
        )

    def descend(self, record: PageRecord) -> 'AncestorContext':
        return AncestorContext(
            id=record.id,
            title=record.title,
            hierarchy=record.hierarchy,
            level=record.level + 1
        )


@dataclass
class AssetRef:
    """An image reference found in converted markdown."""

    url: str
    alt_text: str
    owner_id: str
    index: int
    snippet: str
    local_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def replacement(self) -> Optional[str]:
        if self.local_path is None:
            return None
        return f"![{self.alt_text}]({self.local_path})"


@dataclass
class OutputDocument:
    """A rendered document: ordered frontmatter plus markdown body."""

    slug: str
    frontmatter: Dict[str, Any]
    body: str

    @property
    def file_name(self) -> str:
        return f"{self.slug}.md"


@dataclass(frozen=True)
class EmitResult:
    slug: str
    file_name: str


@dataclass
class PageStatus:
    """Outcome of one page in a sync run, for reporting."""

    page_id: str
    page_title: str
    status: str  # "exported", "failed"
    file_name: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page_id': self.page_id,
            'page_title': self.page_title,
            'status': self.status,
            'file_name': self.file_name,
            'error_message': self.error_message,
            'timestamp': self.timestamp
        }


@dataclass
class SyncResult:
    """Aggregated outcome of a sync run."""

    pages_discovered: int = 0
    emitted: List[EmitResult] = field(default_factory=list)
    statuses: List[PageStatus] = field(default_factory=list)
    changed: bool = False
    dry_run: bool = False
    duration: float = 0.0

    @property
    def failed(self) -> List[PageStatus]:
        return [status for status in self.statuses if status.status == 'failed']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pages_discovered': self.pages_discovered,
            'pages_exported': len(self.emitted),
            'pages_failed': len(self.failed),
            'changed': self.changed,
            'dry_run': self.dry_run,
            'duration': self.duration,
            'pages': [status.to_dict() for status in self.statuses]
        }


__all__ = [
    'AncestorContext',
    'AssetRef',
    'EmitResult',
    'NotionPage',
    'OutputDocument',
    'PageRecord',
    'PageStatus',
    'SyncResult',
    'TITLE_PROPERTY_ALIASES',
    'UNTITLED',
    'compact_id',
    'extract_title'
]
