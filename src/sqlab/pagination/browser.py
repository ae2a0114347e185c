# src/sqlab/pagination/browser.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlab.core.exceptions.custom_exceptions import QueryError
from sqlab.pagination.params import DEFAULT_PAGE_LIMIT, DEFAULT_PAGE_OFFSET
from sqlab.pagination.renderer import PageView, page_view_summary, render_page

logger = logging.getLogger(__name__)

FetchPage = Callable[[int, int], Dict[str, Any]]


class BrowserStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    ERROR = "error"


@dataclass
class PaginationState:
    """Offset and limit of the page currently shown for one table or query."""
    current_offset: int = DEFAULT_PAGE_OFFSET
    current_limit: int = DEFAULT_PAGE_LIMIT

    def reset(self, limit: Optional[int] = None) -> None:
        self.current_offset = DEFAULT_PAGE_OFFSET
        if limit is not None:
            self.current_limit = limit


class PaginatedBrowser:
    """
    Fetch-and-render cycle for one paginated data source.

    States go IDLE -> LOADING -> DISPLAYING or ERROR; a page click on the
    rendered view goes back to LOADING. Every ``load`` performs exactly one
    fetch and one render. Responses are not ordered: the last one to finish
    wins.
    """

    def __init__(self,
                 fetch_page: FetchPage,
                 on_render: Optional[Callable[[PageView], Any]] = None,
                 on_error: Optional[Callable[[str], Any]] = None,
                 limit: int = DEFAULT_PAGE_LIMIT):
        """
        Args:
            fetch_page (FetchPage): Returns the envelope for ``(offset, limit)``;
                raises QueryError on failure
            on_render: Called with each rendered PageView
            on_error: Called with the error message of a failed fetch
            limit (int): Page size for this session
        """
        self._fetch_page = fetch_page
        self._on_render = on_render
        self._on_error = on_error
        self._default_limit = limit
        self._state = PaginationState(current_limit=limit)
        self._status = BrowserStatus.IDLE
        self._view: Optional[PageView] = None
        self._total: Optional[int] = None
        self._error_message: Optional[str] = None

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def status(self) -> BrowserStatus:
        return self._status

    @property
    def view(self) -> Optional[PageView]:
        return self._view

    @property
    def total(self) -> Optional[int]:
        return self._total

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    def open(self, fetch_page: Optional[FetchPage] = None) -> None:
        """Switch to another table or query; the previous pagination state is discarded."""
        if fetch_page is not None:
            self._fetch_page = fetch_page
        self._state = PaginationState(current_limit=self._default_limit)
        self._status = BrowserStatus.IDLE
        self._view = None
        self._total = None
        self._error_message = None

    def load(self, offset: Optional[int] = None, limit: Optional[int] = None) -> Optional[PageView]:
        """
        Fetch and render one page.

        Args:
            offset (Optional[int]): Row offset, defaults to the current one
            limit (Optional[int]): Page size, defaults to the current one

        Returns:
            Optional[PageView]: The rendered view, or None if the fetch failed
        """
        offset = self._state.current_offset if offset is None else offset
        limit = self._state.current_limit if limit is None else limit

        self._status = BrowserStatus.LOADING
        try:
            data = self._fetch_page(offset, limit)
        except QueryError as e:
            self._status = BrowserStatus.ERROR
            self._error_message = e.get_user_message()
            logger.warning(f"Page fetch failed at offset {offset}: {self._error_message}")
            if self._on_error is not None:
                self._on_error(self._error_message)
            return None

        # The server echoes the values it actually applied
        self._state.current_offset = int(data.get('offset') or DEFAULT_PAGE_OFFSET)
        self._state.current_limit = int(data.get('limit') or limit)
        self._total = data.get('total')
        self._error_message = None

        self._view = render_page(data, on_page_change=self.load)
        self._status = BrowserStatus.DISPLAYING
        logger.debug(f"Rendered page {page_view_summary(self._view)}")

        if self._on_render is not None:
            self._on_render(self._view)
        return self._view
