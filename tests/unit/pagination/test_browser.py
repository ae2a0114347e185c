# tests/unit/pagination/test_browser.py
import unittest
from unittest.mock import Mock

from sqlab.core.exceptions.custom_exceptions import QueryError
from sqlab.pagination.browser import BrowserStatus, PaginatedBrowser, PaginationState


class FakeSource:
    """Serves pages of a 25-row result and records every fetch."""

    def __init__(self, total=25):
        self.total = total
        self.calls = []

    def __call__(self, offset, limit):
        self.calls.append((offset, limit))
        rows = [[i + 1] for i in range(offset, min(offset + limit, self.total))]
        return {'columns': ['id'], 'rows': rows, 'total': self.total, 'offset': offset, 'limit': limit}


class TestPaginatedBrowser(unittest.TestCase):
    """Test cases for the fetch-and-render cycle."""

    def setUp(self):
        self.source = FakeSource()
        self.on_render = Mock()
        self.on_error = Mock()
        self.browser = PaginatedBrowser(self.source, on_render=self.on_render, on_error=self.on_error)

    def test_initial_state(self):
        self.assertEqual(self.browser.status, BrowserStatus.IDLE)
        self.assertEqual(self.browser.state, PaginationState(0, 10))
        self.assertIsNone(self.browser.view)

    def test_load_first_page(self):
        view = self.browser.load()

        self.assertEqual(self.source.calls, [(0, 10)])
        self.assertEqual(self.browser.status, BrowserStatus.DISPLAYING)
        self.assertEqual(self.browser.total, 25)
        self.assertEqual(view.row_numbers[0], 1)
        self.on_render.assert_called_once_with(view)

    def test_page_click_fetches_once_and_renders_once(self):
        view = self.browser.load()
        view.click(3)

        self.assertEqual(self.source.calls, [(0, 10), (20, 10)])
        self.assertEqual(self.on_render.call_count, 2)
        self.assertEqual(self.browser.state.current_offset, 20)
        self.assertEqual(self.browser.view.row_numbers, [21, 22, 23, 24, 25])

    def test_click_active_page_does_not_fetch(self):
        view = self.browser.load()
        view.click(1)

        self.assertEqual(len(self.source.calls), 1)

    def test_echoed_values_are_stored(self):
        def clamping_source(offset, limit):
            return {'columns': ['id'], 'rows': [], 'total': 0, 'offset': 0, 'limit': 1000}

        browser = PaginatedBrowser(clamping_source)
        browser.load(-5, 50000)

        self.assertEqual(browser.state, PaginationState(0, 1000))

    def test_fetch_error(self):
        def failing_source(offset, limit):
            raise QueryError(query="SELECT * FROM nowhere", error_message="Table 'nowhere' doesn't exist")

        self.browser.open(failing_source)
        self.assertIsNone(self.browser.load())

        self.assertEqual(self.browser.status, BrowserStatus.ERROR)
        self.assertEqual(self.browser.error_message, "Table 'nowhere' doesn't exist")
        self.on_error.assert_called_once_with("Table 'nowhere' doesn't exist")
        self.on_render.assert_not_called()

    def test_open_resets_state(self):
        self.browser.load(20, 10)
        self.browser.open(FakeSource(total=3))

        self.assertEqual(self.browser.state, PaginationState(0, 10))
        self.assertEqual(self.browser.status, BrowserStatus.IDLE)
        self.assertIsNone(self.browser.total)

        view = self.browser.load()
        self.assertEqual(view.total, 3)
        self.assertEqual([button.label for button in view.buttons], ["3"])


if __name__ == '__main__':
    unittest.main()
