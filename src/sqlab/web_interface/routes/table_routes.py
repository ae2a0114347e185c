# src/sqlab/web_interface/routes/table_routes.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
import logging

from sqlab.web_interface.models import TableColumnsResponse, TableListResponse
from sqlab.web_interface.dependencies import get_query_service
from sqlab.web_interface.routes.errors import to_http_exception
from sqlab.database.query_service import QueryService

# Get logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


@router.get("/table-data/{table_name}")
def get_table_data(
        table_name: str,
        offset: Optional[str] = Query(None, description="Rows to skip"),
        limit: Optional[str] = Query(None, description="Rows per page"),
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get one page of a table.
    """
    try:
        result = query_service.get_table_data(table_name, offset, limit)
        return result.to_envelope(table_name=table_name)
    except Exception as e:
        raise to_http_exception(e, f"reading table {table_name}") from e


@router.get("/table-columns/{table_name}", response_model=TableColumnsResponse)
def get_table_columns(
        table_name: str,
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get the column names of a table.
    """
    try:
        return {"table_name": table_name, "columns": query_service.get_table_columns(table_name)}
    except Exception as e:
        raise to_http_exception(e, f"reading columns of {table_name}") from e


@router.get("/list-tsv-files", response_model=TableListResponse)
def list_tsv_files(
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get the TSV reference tables available in the data directory.
    """
    try:
        return {"tables": query_service.list_tsv_files()}
    except Exception as e:
        raise to_http_exception(e, "listing TSV files") from e


@router.get("/tsv-data/{name}")
def get_tsv_data(
        name: str,
        offset: Optional[str] = Query(None, description="Rows to skip"),
        limit: Optional[str] = Query(None, description="Rows per page"),
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get one page of a TSV reference table.
    """
    try:
        result = query_service.get_tsv_data(name, offset, limit)
        return result.to_envelope(table_name=name)
    except Exception as e:
        raise to_http_exception(e, f"reading TSV file {name}") from e
