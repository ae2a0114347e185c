# src/sqlab/pagination/__init__.py
from sqlab.pagination.params import (
    DEFAULT_PAGE_OFFSET,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    PaginationParams,
    PageEnvelope,
    build_envelope,
    parse_int
)
from sqlab.pagination.renderer import PageButton, PageView, render_page, center_scroll_left
from sqlab.pagination.browser import BrowserStatus, PaginationState, PaginatedBrowser

__all__ = [
    'DEFAULT_PAGE_OFFSET',
    'DEFAULT_PAGE_LIMIT',
    'MAX_PAGE_LIMIT',
    'PaginationParams',
    'PageEnvelope',
    'build_envelope',
    'parse_int',
    'PageButton',
    'PageView',
    'render_page',
    'center_scroll_left',
    'BrowserStatus',
    'PaginationState',
    'PaginatedBrowser'
]
