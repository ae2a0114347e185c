# src/sqlab/database/tsv_source.py
import csv
import logging
import threading
from pathlib import Path
from typing import Dict, List, Tuple, Union

import pandas as pd

from sqlab.core.exceptions.custom_exceptions import QueryError
from sqlab.database.query_executor import StatementResult
from sqlab.pagination.params import PaginationParams

logger = logging.getLogger(__name__)

TSV_SUFFIX = ".tsv"


class TsvDataSource:
    """
    Paginated access to the ``*.tsv`` reference tables shipped in a data directory.

    Every value is read as text; empty cells are None. Parsed files are cached
    until their modification time changes.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self._cache: Dict[str, Tuple[float, pd.DataFrame]] = {}
        self._lock = threading.Lock()

    def list_files(self) -> List[str]:
        """
        Names (without extension) of the TSV files in the data directory.

        Raises:
            QueryError: If the data directory cannot be read
        """
        if not self.data_dir.is_dir():
            raise QueryError(query=str(self.data_dir),
                             error_message=f"File system error: data directory {self.data_dir} not found")
        return sorted(path.stem for path in self.data_dir.iterdir()
                      if path.is_file() and path.suffix == TSV_SUFFIX)

    def _resolve(self, name: str) -> Path:
        path = (self.data_dir / f"{name}{TSV_SUFFIX}").resolve()
        if path.parent != self.data_dir.resolve() or not path.is_file():
            raise QueryError(query=name, error_message=f"TSV file '{name}' not found")
        return path

    def load_frame(self, name: str) -> pd.DataFrame:
        path = self._resolve(name)
        mtime = path.stat().st_mtime

        with self._lock:
            cached = self._cache.get(name)
            if cached is not None and cached[0] == mtime:
                return cached[1]

        try:
            frame = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False, quoting=csv.QUOTE_NONE)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise QueryError(query=name, error_message=f"Failed to read TSV file '{name}': {str(e)}") from e

        logger.debug(f"Loaded TSV file {path} ({len(frame)} rows)")

        with self._lock:
            self._cache[name] = (mtime, frame)
        return frame

    def get_page(self, name: str, params: PaginationParams) -> StatementResult:
        """
        One page of a TSV file.

        Raises:
            QueryError: If the file does not exist or cannot be parsed
        """
        frame = self.load_frame(name)
        page = frame.iloc[params.offset:params.offset + params.limit]
        rows = [[None if value == "" or pd.isna(value) else value for value in row]
                for row in page.itertuples(index=False, name=None)]
        return StatementResult(columns=[str(column) for column in frame.columns],
                               rows=rows, total=len(frame), params=params)
