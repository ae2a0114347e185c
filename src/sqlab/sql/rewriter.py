# src/sqlab/sql/rewriter.py
"""
Formula column rewriting for answer checking.

A formula is a SQL expression (usually a hash or check function) that must
appear as an extra column of every SELECT a student submits. The rewriter
appends it to each SELECT list of a ``;``-separated script:

    >>> add_column_to_selects("SELECT a, b FROM t", "x")
    'SELECT a, b, x FROM t;'

Each statement first goes through a structural parse (sqlparse). When the parse
cannot place the insertion point, a regex heuristic takes over. A statement
that defeats both is passed through untouched; checking then fails downstream
for lack of the expected column, which is not a rewriter error.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

import sqlparse
from sqlparse import tokens as T
from sqlparse.sql import Comment, Statement

logger = logging.getLogger(__name__)

# Non-greedy: the column list ends at the first FROM
SELECT_FROM_PATTERN = re.compile(r'\bSELECT\s+(.+?)\s+FROM\b', re.IGNORECASE | re.DOTALL)

SELECT_MODIFIERS = {'DISTINCT', 'ALL', 'DISTINCTROW', 'HIGH_PRIORITY', 'STRAIGHT_JOIN',
                    'SQL_CALC_FOUND_ROWS', 'SQL_NO_CACHE', 'SQL_CACHE'}


@dataclass(frozen=True)
class ParsedSelect:
    """The SELECT list was located; ``insert_at`` is the offset right after its last column."""
    insert_at: int


@dataclass(frozen=True)
class NotSelect:
    """The statement parsed cleanly and is not a SELECT."""
    statement_type: str


@dataclass(frozen=True)
class Unparsed:
    """The structural parse could not place the insertion point."""
    reason: str


SelectListLocation = Union[ParsedSelect, NotSelect, Unparsed]


def split_statements(sql_text) -> List[str]:
    """
    Split SQL text on every literal ``;`` and drop blank pieces.

    Semicolons inside string literals or comments split too.
    """
    if not sql_text or not isinstance(sql_text, str):
        return []
    return [stmt.strip() for stmt in sql_text.split(';') if stmt.strip()]


def _is_skippable(token) -> bool:
    return token.is_whitespace or isinstance(token, Comment) or token.ttype in T.Comment


def _next_significant(tokens, index: int) -> int:
    while index < len(tokens) and _is_skippable(tokens[index]):
        index += 1
    return index


def _is_from(token) -> bool:
    return token.is_keyword and token.normalized == 'FROM'


def _end_of_last_expression(tokens) -> int:
    """Length of the token run up to its last leaf that is neither whitespace nor comment."""
    offset = end = 0
    for token in tokens:
        for leaf in token.flatten():
            offset += len(leaf.value)
            if not (leaf.is_whitespace or leaf.ttype in T.Comment):
                end = offset
    return end


def locate_select_list(statement: str) -> SelectListLocation:
    """
    Find where a formula column can be inserted in a single SELECT statement.

    Args:
        statement (str): One SQL statement without its terminator

    Returns:
        SelectListLocation: ParsedSelect, NotSelect or Unparsed
    """
    try:
        parsed = sqlparse.parse(statement)
    except Exception as e:
        return Unparsed(f"parser error: {e}")

    if not parsed:
        return Unparsed("empty parse")

    stmt: Statement = parsed[0]
    statement_type = stmt.get_type()
    if statement_type == 'UNKNOWN':
        return Unparsed("unrecognized statement type")
    if statement_type != 'SELECT':
        return NotSelect(statement_type)

    tokens = stmt.tokens
    if str(stmt) != statement:
        return Unparsed("parse does not cover the statement text")

    # Top-level SELECT keyword; CTE bodies are nested inside groups
    select_index = next(
        (i for i, tok in enumerate(tokens)
         if tok.ttype is T.Keyword.DML and tok.normalized == 'SELECT'),
        None
    )
    if select_index is None:
        return Unparsed("no top-level SELECT keyword")

    index = _next_significant(tokens, select_index + 1)
    while index < len(tokens) and tokens[index].is_keyword \
            and tokens[index].normalized in SELECT_MODIFIERS:
        index = _next_significant(tokens, index + 1)

    if index >= len(tokens):
        return Unparsed("SELECT without a column list")

    columns = tokens[index]
    if columns.is_keyword and columns.ttype is not T.Wildcard:
        return Unparsed(f"unexpected keyword {columns.normalized} after SELECT")

    # Comments may split the list into several groups or be folded into its last column
    from_index = next((i for i in range(index + 1, len(tokens)) if _is_from(tokens[i])), None)
    if from_index is None:
        return Unparsed("no FROM clause after the column list")

    start = sum(len(str(tok)) for tok in tokens[:index])
    return ParsedSelect(insert_at=start + _end_of_last_expression(tokens[index:from_index]))


def regex_rewrite(statement: str, formula: str) -> Optional[str]:
    """
    Heuristic fallback: insert the formula before the first ``FROM``.

    Returns:
        Optional[str]: The rewritten statement, or None when no
        ``SELECT ... FROM`` could be matched
    """
    match = SELECT_FROM_PATTERN.search(statement)
    if not match:
        return None

    columns = match.group(1)
    if columns.strip() == '*':
        return f"{statement[:match.start(1)]}*, {formula}{statement[match.end(1):]}"

    # A line comment closing the list would swallow the formula
    separator = "\n, " if '--' in columns.rsplit('\n', 1)[-1] else ", "
    return f"{statement[:match.end(1)]}{separator}{formula}{statement[match.end(1):]}"


def rewrite_statement(statement: str, formula: str) -> str:
    """
    Append the formula to one statement's SELECT list.

    Args:
        statement (str): One SQL statement without its terminator
        formula (str): Expression to append

    Returns:
        str: The rewritten statement, or the original when it already mentions
        the formula, is not a SELECT, or has no locatable FROM clause
    """
    if formula.lower() in statement.lower():
        return statement

    location = locate_select_list(statement)

    if isinstance(location, ParsedSelect):
        return f"{statement[:location.insert_at]}, {formula}{statement[location.insert_at:]}"

    if isinstance(location, NotSelect):
        return statement

    logger.debug(f"Structural parse failed ({location.reason}), using regex fallback")
    rewritten = regex_rewrite(statement, formula)
    if rewritten is None:
        logger.debug(f"No SELECT ... FROM found, statement left unchanged: {statement[:50]}")
        return statement
    return rewritten


def add_column_to_selects(sql_text, formula: str):
    """
    Add a formula column to every SELECT of a ``;``-separated script.

    Args:
        sql_text: SQL script; anything that is not a non-empty string is returned as is
        formula (str): Expression to append to each SELECT list

    Returns:
        The script with each non-blank statement rewritten, ``;``-terminated
        and joined by newlines

    Raises:
        ValueError: If the formula is empty
    """
    if not formula or not formula.strip():
        raise ValueError("Formula must be a non-empty SQL expression")

    if not sql_text or not isinstance(sql_text, str):
        return sql_text

    return '\n'.join(
        f"{rewrite_statement(stmt, formula)};" for stmt in split_statements(sql_text)
    )


def enhance_query_with_formula(query: str, formula: str) -> str:
    """Rewrite a submitted query for checking unless it already carries the formula."""
    if not query or not formula:
        return query

    if formula.lower() in query.lower():
        return query

    return add_column_to_selects(query, formula)
