# src/sqlab/pagination/renderer.py
"""
Page rendering for paginated tables.

Page buttons are labeled with the last absolute row index they show
(``10, 20, 25`` for 25 rows by 10) rather than with page numbers, so students
browse by row address.
"""
import html
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlab.core.exceptions.custom_exceptions import MalformedEnvelopeError
from sqlab.pagination.params import DEFAULT_PAGE_LIMIT, DEFAULT_PAGE_OFFSET

PageChangeCallback = Callable[[int, int], Any]

NULL_DISPLAY = 'NULL'


@dataclass(frozen=True)
class PageButton:
    page: int
    offset: int
    label: str
    title: str
    active: bool = False


def row_numbers(offset: int, count: int) -> List[int]:
    """1-based row numbers continuing across pages."""
    return [offset + index + 1 for index in range(count)]


def center_scroll_left(container_width: float, button_left: float, button_width: float) -> float:
    """
    Horizontal scroll position that centers the active page button.

    Never negative; a zero-width container simply scrolls to the button.
    """
    return max(0.0, button_left - (container_width or 0) / 2 + (button_width or 0) / 2)


def build_page_buttons(offset: int, limit: int, total: int) -> List[PageButton]:
    """One button per page, labeled ``min(page_offset + limit, total)``."""
    total_pages = math.ceil(total / limit) if total > 0 else 0
    current_page = offset // limit + 1

    buttons = []
    for page in range(1, total_pages + 1):
        page_offset = (page - 1) * limit
        row_end = min(page_offset + limit, total)
        buttons.append(PageButton(
            page=page,
            offset=page_offset,
            label=str(row_end),
            title=f"Rows {page_offset + 1}-{row_end}",
            active=page == current_page
        ))
    return buttons


@dataclass
class PageView:
    """A rendered page: table content, row numbers and page buttons."""

    columns: List[str]
    rows: List[List[Any]]
    offset: int
    limit: int
    total: Optional[int]
    on_page_change: Optional[PageChangeCallback] = None
    buttons: List[PageButton] = field(default_factory=list)

    @property
    def row_numbers(self) -> List[int]:
        return row_numbers(self.offset, len(self.rows))

    @property
    def total_pages(self) -> int:
        return len(self.buttons)

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1

    def active_button(self) -> Optional[PageButton]:
        return next((button for button in self.buttons if button.active), None)

    def click(self, page: int) -> bool:
        """
        Handle a click on page button ``page``.

        Returns:
            bool: True if ``on_page_change`` was invoked; clicking the active
            page does nothing

        Raises:
            ValueError: If no button exists for ``page``
        """
        if not any(button.page == page for button in self.buttons):
            raise ValueError(f"No page button for page {page}")

        if page == self.current_page:
            return False

        if self.on_page_change is not None:
            self.on_page_change((page - 1) * self.limit, self.limit)
        return True

    def to_html(self) -> str:
        """Table markup with a row-number column, followed by the page buttons."""
        header = '<tr><th class="row-number-header"></th>' + ''.join(
            f'<th>{html.escape(str(column))}</th>' for column in self.columns
        ) + '</tr>'

        body = ''.join(
            f'<tr><td class="row-number">{number}</td>' + ''.join(
                f'<td>{html.escape(NULL_DISPLAY if cell is None else str(cell))}</td>' for cell in row
            ) + '</tr>'
            for number, row in zip(self.row_numbers, self.rows)
        )

        markup = f'<table><thead>{header}</thead><tbody>{body}</tbody></table>'

        if self.buttons:
            buttons = ''.join(
                f'<button class="page-button{" active" if button.active else ""}" '
                f'data-page="{button.page}" title="{html.escape(button.title)}">{button.label}</button>'
                for button in self.buttons
            )
            markup = (f'<div class="table-actions"><div class="pagination-scroll">'
                      f'<div class="pagination-buttons">{buttons}</div></div></div>{markup}')

        return markup


def render_page(data: Mapping[str, Any], on_page_change: Optional[PageChangeCallback] = None) -> PageView:
    """
    Render a ``{columns, rows, total, offset, limit}`` payload.

    ``offset`` and ``limit`` default to 0 and 10. Without ``total`` no page
    buttons are produced and the rows are taken as the whole result.

    Raises:
        MalformedEnvelopeError: If ``columns`` or ``rows`` is missing
    """
    missing = [key for key in ('columns', 'rows') if data.get(key) is None]
    if missing:
        raise MalformedEnvelopeError(missing)

    offset = data.get('offset') or DEFAULT_PAGE_OFFSET
    limit = data.get('limit') or DEFAULT_PAGE_LIMIT
    total = data.get('total')

    view = PageView(
        columns=list(data['columns']),
        rows=[list(row) for row in data['rows']],
        offset=int(offset),
        limit=int(limit),
        total=int(total) if total is not None else None,
        on_page_change=on_page_change
    )

    if view.total is not None:
        view.buttons = build_page_buttons(view.offset, view.limit, view.total)

    return view


def page_view_summary(view: PageView) -> Dict[str, Any]:
    """Plain-data description of a view, for logging and JSON debugging output."""
    return {
        'offset': view.offset,
        'limit': view.limit,
        'total': view.total,
        'current_page': view.current_page,
        'total_pages': view.total_pages,
        'labels': [button.label for button in view.buttons],
    }
