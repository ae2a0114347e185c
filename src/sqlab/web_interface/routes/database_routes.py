# src/sqlab/web_interface/routes/database_routes.py
from fastapi import APIRouter, Depends
import logging

from sqlab.web_interface.models import DatabaseInfoResponse, TableListResponse
from sqlab.web_interface.dependencies import get_query_service
from sqlab.web_interface.routes.errors import to_http_exception
from sqlab.database.query_service import QueryService

# Get logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


@router.get("/database-info", response_model=DatabaseInfoResponse)
def get_database_info(
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get the name, host and adventure of the current database.
    Answers with a "Not connected" placeholder when the database is down.
    """
    return query_service.get_database_info()


@router.get("/list-tables", response_model=TableListResponse)
def list_tables(
        query_service: QueryService = Depends(get_query_service)
):
    """
    Get the business tables of the database, system tables excluded.
    """
    try:
        return {"tables": query_service.list_tables()}
    except Exception as e:
        raise to_http_exception(e, "listing tables") from e
