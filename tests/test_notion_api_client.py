"""Tests for the Notion REST client with a mocked HTTP session."""

import unittest
from unittest.mock import MagicMock

import requests

from notion_api_client import NotionApiClient


def json_response(data, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f'{status_code} Client Error', response=response
        )
    return response


class TestNotionApiClient(unittest.TestCase):
    def setUp(self):
        self.client = NotionApiClient(token='secret_test', timeout=10)
        self.client.session = MagicMock()

    def test_session_headers(self):
        """Test bearer authentication and the API version header are set."""
        client = NotionApiClient(token='secret_xyz', api_version='2022-06-28')

        self.assertEqual(client.session.headers['Authorization'], 'Bearer secret_xyz')
        self.assertEqual(client.session.headers['Notion-Version'], '2022-06-28')

    def test_token_is_required(self):
        with self.assertRaises(ValueError):
            NotionApiClient(token='')

    def test_list_children_follows_cursor(self):
        """Test listing keeps requesting pages until has_more is false."""
        self.client.session.request.side_effect = [
            json_response({'results': [{'id': 'a'}, {'id': 'b'}], 'has_more': True, 'next_cursor': 'cur1'}),
            json_response({'results': [{'id': 'c'}], 'has_more': False, 'next_cursor': None}),
        ]

        children = self.client.list_children('parent')

        self.assertEqual([child['id'] for child in children], ['a', 'b', 'c'])
        first, second = self.client.session.request.call_args_list
        self.assertEqual(first.args, ('GET', 'https://api.notion.com/v1/blocks/parent/children'))
        self.assertEqual(first.kwargs['params'], {'page_size': 100})
        self.assertEqual(second.kwargs['params'], {'page_size': 100, 'start_cursor': 'cur1'})
        self.assertEqual(second.kwargs['timeout'], 10)

    def test_get_page(self):
        self.client.session.request.return_value = json_response({'id': 'p1', 'properties': {}})

        page = self.client.get_page('p1')

        self.assertEqual(page['id'], 'p1')
        self.assertEqual(
            self.client.session.request.call_args.args,
            ('GET', 'https://api.notion.com/v1/pages/p1')
        )

    def test_http_error_propagates(self):
        """Test API errors are raised to the caller without retrying."""
        self.client.session.request.return_value = json_response(
            {'object': 'error', 'code': 'object_not_found'}, status_code=404
        )

        with self.assertRaises(requests.HTTPError):
            self.client.get_page('missing')

        self.assertEqual(self.client.session.request.call_count, 1)

    def test_block_tree_attaches_children(self):
        """Test nested blocks are fetched while child pages stay leaves."""
        listings = {
            'page': [
                {'id': 'toggle', 'type': 'toggle', 'has_children': True},
                {'id': 'sub', 'type': 'child_page', 'has_children': True},
                {'id': 'para', 'type': 'paragraph', 'has_children': False},
            ],
            'toggle': [{'id': 'inner', 'type': 'paragraph', 'has_children': False}],
        }
        self.client.list_children = MagicMock(side_effect=lambda block_id: listings[block_id])

        blocks = self.client.get_block_tree('page')

        self.assertEqual(blocks[0]['children'], [{'id': 'inner', 'type': 'paragraph', 'has_children': False}])
        self.assertNotIn('children', blocks[1])
        self.assertNotIn('children', blocks[2])
        self.assertEqual([call.args[0] for call in self.client.list_children.call_args_list], ['page', 'toggle'])

    def test_from_config(self):
        config = {
            'notion': {'token': 'secret_cfg', 'base_url': 'https://api.notion.com/v1/', 'api_version': '2022-06-28'},
            'advanced': {'request_timeout': None},
        }

        client = NotionApiClient.from_config(config)

        self.assertEqual(client.base_url, 'https://api.notion.com/v1')
        self.assertIsNone(client.timeout)


if __name__ == '__main__':
    unittest.main()
