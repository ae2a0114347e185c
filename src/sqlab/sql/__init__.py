# src/sqlab/sql/__init__.py
from sqlab.sql.rewriter import (
    ParsedSelect,
    NotSelect,
    Unparsed,
    split_statements,
    locate_select_list,
    add_column_to_selects,
    enhance_query_with_formula
)

__all__ = [
    'ParsedSelect',
    'NotSelect',
    'Unparsed',
    'split_statements',
    'locate_select_list',
    'add_column_to_selects',
    'enhance_query_with_formula'
]
