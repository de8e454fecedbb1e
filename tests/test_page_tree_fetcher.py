"""Tests for recursive page tree discovery."""

import unittest

import requests

from fetchers import FetcherError, PageTreeFetcher
from notion_fakes import FakeNotionClient, block, build_tree, paragraph


class TestPageTreeFetcher(unittest.TestCase):
    def setUp(self):
        self.client = FakeNotionClient()
        self.fetcher = PageTreeFetcher(self.client)

    def test_discovers_every_page_of_a_full_tree(self):
        """Test a depth 3, branching 3 tree yields every page with consistent levels."""
        depth, branching = 3, 3
        created = build_tree(self.client, 'root', depth, branching)

        records = self.fetcher.discover('root')

        self.assertEqual(len(records), sum(branching ** d for d in range(1, depth + 1)))
        self.assertEqual([record.id for record in records], created)
        for record in records:
            self.assertEqual(len(record.hierarchy), record.level + 1)
            self.assertEqual(record.hierarchy[-1], record.title)
            self.assertEqual(record.tags, record.hierarchy[:-1])

    def test_pre_order(self):
        """Test each page is followed by its own subtree before its next sibling."""
        build_tree(self.client, 'root', 2, 2)

        records = self.fetcher.discover('root')

        self.assertEqual([record.id for record in records], ['p-0', 'p-0-0', 'p-0-1', 'p-1', 'p-1-0', 'p-1-1'])

    def test_root_children_have_no_parent(self):
        self.client.add_page('root', 'top', 'Top')

        record = self.fetcher.discover('root')[0]

        self.assertIsNone(record.parent_id)
        self.assertIsNone(record.parent_title)
        self.assertEqual(record.hierarchy, ('Top',))
        self.assertEqual(record.tags, ())
        self.assertEqual(record.level, 0)

    def test_parent_bookkeeping(self):
        """Test grandchildren carry their direct parent and the full ancestry."""
        self.client.add_page('root', 'guides', 'Guides')
        self.client.add_page('guides', 'python', 'Python')
        self.client.add_page('python', 'venv', 'Virtualenvs')

        records = {record.id: record for record in self.fetcher.discover('root')}

        venv = records['venv']
        self.assertEqual(venv.parent_id, 'python')
        self.assertEqual(venv.parent_title, 'Python')
        self.assertEqual(venv.hierarchy, ('Guides', 'Python', 'Virtualenvs'))
        self.assertEqual(venv.tags, ('Guides', 'Python'))
        self.assertEqual(venv.level, 2)

    def test_siblings_do_not_share_context(self):
        """Test a sibling's subtree does not leak into the next sibling's hierarchy."""
        self.client.add_page('root', 'a', 'A')
        self.client.add_page('a', 'a1', 'A1')
        self.client.add_page('root', 'b', 'B')
        self.client.add_page('b', 'b1', 'B1')

        records = {record.id: record for record in self.fetcher.discover('root')}

        self.assertEqual(records['b'].hierarchy, ('B',))
        self.assertEqual(records['b1'].hierarchy, ('B', 'B1'))
        self.assertEqual(records['a1'].hierarchy, ('A', 'A1'))

    def test_non_page_entries_are_ignored(self):
        """Test content blocks and databases are neither retrieved nor traversed."""
        self.client.add_entry('root', paragraph('loose text'))
        self.client.add_entry('root', dict(block('child_database', title='Tasks'), id='db1'))
        self.client.add_page('root', 'only', 'Only page')

        records = self.fetcher.discover('root')

        self.assertEqual([record.id for record in records], ['only'])
        self.assertEqual(self.client.page_requests, ['only'])

    def test_listing_failure_aborts_discovery(self):
        """Test a failed listing anywhere in the tree raises with its cause."""
        build_tree(self.client, 'root', 2, 2)
        self.client.failing_listings.add('p-1')

        with self.assertRaises(FetcherError) as context:
            self.fetcher.discover('root')

        self.assertIn('p-1', str(context.exception))
        self.assertIsInstance(context.exception.__cause__, requests.HTTPError)

    def test_page_retrieval_failure_aborts_discovery(self):
        self.client.add_page('root', 'good', 'Good')
        self.client.add_page('root', 'bad', 'Bad')
        self.client.failing_pages.add('bad')

        with self.assertRaises(FetcherError) as context:
            self.fetcher.discover('root')

        self.assertIn('Failed to retrieve page bad', str(context.exception))

    def test_depth_guard(self):
        """Test a hierarchy deeper than the limit is rejected instead of recursing forever."""
        fetcher = PageTreeFetcher(self.client, max_depth=2)
        build_tree(self.client, 'root', 5, 1)

        with self.assertRaises(FetcherError):
            fetcher.discover('root')

    def test_empty_root(self):
        self.assertEqual(self.fetcher.discover('root'), [])


if __name__ == '__main__':
    unittest.main()
