# src/sqlab/web_interface/models.py
from typing import List, Optional, Union
from pydantic import BaseModel, Field

# Offsets and limits are coerced, never rejected: "20", 20 and "abc" are all accepted
PageValue = Optional[Union[int, float, str]]


class QueryRequest(BaseModel):
    """Query request model for API."""
    query: str = Field(..., description="SQL to execute; several statements separated by ';'")
    offset: PageValue = Field(None, description="Rows to skip")
    limit: PageValue = Field(None, description="Rows per page")
    skip_pagination: bool = Field(False, description="Return every row in one page")


class CheckQueryRequest(BaseModel):
    """Answer check request: the query is rewritten to select the formula too."""
    query: str = Field(..., description="The student's SQL")
    formula: str = Field("", description="Verification expression of the current exercise")
    offset: PageValue = Field(None, description="Rows to skip")
    limit: PageValue = Field(None, description="Rows per page")


class TableListResponse(BaseModel):
    tables: List[str]


class TableColumnsResponse(BaseModel):
    table_name: str
    columns: List[str]


class DatabaseInfoResponse(BaseModel):
    """Database information model."""
    name: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    adventure: str
