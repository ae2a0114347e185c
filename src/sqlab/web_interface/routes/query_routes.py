# src/sqlab/web_interface/routes/query_routes.py
from fastapi import APIRouter, Depends
import logging

from sqlab.web_interface.models import QueryRequest, CheckQueryRequest
from sqlab.web_interface.dependencies import get_query_service
from sqlab.web_interface.routes.errors import to_http_exception
from sqlab.database.query_service import QueryService

# Get logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


@router.post("/execute-query")
def execute_query(
        request: QueryRequest,
        query_service: QueryService = Depends(get_query_service)
):
    """
    Execute SQL and return one page of the last statement's result.
    """
    try:
        result = query_service.execute_query(
            query=request.query,
            offset=request.offset,
            limit=request.limit,
            skip_pagination=request.skip_pagination
        )
        return result.to_envelope()
    except Exception as e:
        raise to_http_exception(e, "executing query") from e


@router.post("/check-query")
def check_query(
        request: CheckQueryRequest,
        query_service: QueryService = Depends(get_query_service)
):
    """
    Execute a submitted answer with the exercise formula appended to each SELECT.
    The rewritten SQL is returned alongside the page.
    """
    try:
        result = query_service.check_solution(
            query=request.query,
            formula=request.formula,
            offset=request.offset,
            limit=request.limit
        )
        return result.to_envelope(rewritten_query=result.metadata.get('rewritten_query'))
    except Exception as e:
        raise to_http_exception(e, "checking query") from e

