"""Filesystem and URL safe slugs, unique within one sync run."""

import re
from typing import Dict, Set

FALLBACK_SLUG = 'untitled'

_WHITESPACE = re.compile(r'\s+')
# ASCII word characters, hyphens and Hangul syllables survive.
_DISALLOWED = re.compile(r'[^\w\-가-힣]', re.ASCII)
_REPEATED_HYPHENS = re.compile(r'-{2,}')


def normalize_slug(title: str) -> str:
    """
    Convert a title to a slug.

    >>> normalize_slug('  Hello,  World! ')
    'hello-world'
    """
    slug = title.lower()
    slug = _WHITESPACE.sub('-', slug)
    slug = _DISALLOWED.sub('', slug)
    slug = _REPEATED_HYPHENS.sub('-', slug)
    slug = slug.strip('-')
    return slug or FALLBACK_SLUG


class SlugRegistry:
    """
    Hands out unique slugs for one sync run.

    The first title with a given base gets the bare base; later ones get
    ``base-1``, ``base-2`` and so on. Not thread-safe: callers assign slugs
    one page at a time.
    """

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def assign(self, title: str) -> str:
        base = normalize_slug(title)

        if base not in self._counts:
            self._counts[base] = 1
            if base not in self._issued:
                self._issued.add(base)
                return base

        # A title like "foo-1" may already own the suffixed form.
        while True:
            count = self._counts[base]
            self._counts[base] = count + 1
            candidate = f"{base}-{count}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    def __len__(self) -> int:
        return len(self._issued)

    def __contains__(self, slug: str) -> bool:
        return slug in self._issued


__all__ = ['FALLBACK_SLUG', 'SlugRegistry', 'normalize_slug']
