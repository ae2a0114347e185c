# src/sqlab/client/api_client.py
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from sqlab.core.exceptions.custom_exceptions import QueryError

logger = logging.getLogger(__name__)

FetchPage = Callable[[Optional[int], Optional[int]], Dict[str, Any]]


class SQLabClient:
    """
    HTTP client for the SQLab console API.

    Every failure, whether an HTTP error status or a transport error, surfaces
    as ``QueryError`` carrying the message to show the student. Requests are
    never retried.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """
        Args:
            base_url (str): Root URL of the API, e.g. ``http://localhost:3000``
            session (Optional[requests.Session]): Session to send requests with
            timeout (Optional[float]): Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, query: str = "", **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"Request to {url} failed: {str(e)}")
            raise QueryError(query=query or path, error_message=f"Network error: {str(e)}") from e

        if not response.ok:
            message = response.reason or f"HTTP {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get('error'):
                message = str(body['error'])
            raise QueryError(query=query or path, error_message=message)

        try:
            return response.json()
        except ValueError as e:
            raise QueryError(query=query or path, error_message="Invalid JSON in response") from e

    @staticmethod
    def _page_params(offset: Optional[int], limit: Optional[int]) -> Dict[str, Any]:
        params = {}
        if offset is not None:
            params['offset'] = offset
        if limit is not None:
            params['limit'] = limit
        return params

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def get_database_info(self) -> Dict[str, Any]:
        return self._request("GET", "/database-info")

    def list_tables(self) -> List[str]:
        return self._request("GET", "/list-tables").get('tables', [])

    def get_table_columns(self, table_name: str) -> List[str]:
        return self._request("GET", f"/table-columns/{table_name}").get('columns', [])

    def get_table_data(self, table_name: str, offset: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        return self._request("GET", f"/table-data/{table_name}", query=table_name,
                             params=self._page_params(offset, limit))

    def execute_query(self,
                      query: str,
                      offset: Optional[int] = None,
                      limit: Optional[int] = None,
                      skip_pagination: bool = False) -> Dict[str, Any]:
        """
        Run SQL on the server and return one page of the last statement's result.

        Raises:
            QueryError: With the database message when the server rejects the query
        """
        payload = {'query': query, **self._page_params(offset, limit)}
        if skip_pagination:
            payload['skip_pagination'] = True
        return self._request("POST", "/execute-query", query=query, json=payload)

    def check_query(self,
                    query: str,
                    formula: str,
                    offset: Optional[int] = None,
                    limit: Optional[int] = None) -> Dict[str, Any]:
        payload = {'query': query, 'formula': formula, **self._page_params(offset, limit)}
        return self._request("POST", "/check-query", query=query, json=payload)

    def list_tsv_files(self) -> List[str]:
        return self._request("GET", "/list-tsv-files").get('tables', [])

    def get_tsv_data(self, name: str, offset: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        return self._request("GET", f"/tsv-data/{name}", query=name, params=self._page_params(offset, limit))


def table_fetcher(client: SQLabClient, table_name: str) -> FetchPage:
    """Page source for ``PaginatedBrowser`` over a table."""
    def fetch_page(offset: Optional[int], limit: Optional[int]) -> Dict[str, Any]:
        return client.get_table_data(table_name, offset, limit)
    return fetch_page


def query_fetcher(client: SQLabClient, query: str) -> FetchPage:
    """Page source for ``PaginatedBrowser`` over a query result; the query is re-run per page."""
    def fetch_page(offset: Optional[int], limit: Optional[int]) -> Dict[str, Any]:
        return client.execute_query(query, offset, limit)
    return fetch_page


def tsv_fetcher(client: SQLabClient, name: str) -> FetchPage:
    def fetch_page(offset: Optional[int], limit: Optional[int]) -> Dict[str, Any]:
        return client.get_tsv_data(name, offset, limit)
    return fetch_page
