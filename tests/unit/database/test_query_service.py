# tests/unit/database/test_query_service.py
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock

import pandas as pd
import sqlalchemy as sa

from sqlab.core.exceptions.custom_exceptions import QueryError, DatabaseConnectionError
from sqlab.database.connection import DatabaseConnection
from sqlab.database.query_service import QueryService, QueryResult
from sqlab.database.query_executor import StatementResult


class TestQueryResult(unittest.TestCase):
    """Test cases for the QueryResult class."""

    def setUp(self):
        self.result = QueryResult(
            columns=["id", "name"],
            rows=[[1, "Alice"], [2, "Bob"]],
            total=12,
            offset=10,
            limit=10,
            query="SELECT id, name FROM villagers",
            execution_time=0.1
        )

    def test_to_envelope(self):
        envelope = self.result.to_envelope(table_name="villagers")

        self.assertEqual(envelope["columns"], ["id", "name"])
        self.assertEqual(envelope["rows"], [[1, "Alice"], [2, "Bob"]])
        self.assertEqual((envelope["total"], envelope["offset"], envelope["limit"]), (12, 10, 10))
        self.assertEqual(envelope["table_name"], "villagers")

    def test_to_dataframe(self):
        df = self.result.to_dataframe()

        self.assertIsInstance(df, pd.DataFrame)
        self.assertEqual(list(df.columns), ["id", "name"])
        self.assertEqual(df.iloc[1]["name"], "Bob")

    def test_first_and_value(self):
        self.assertEqual(self.result.first(), [1, "Alice"])
        self.assertEqual(self.result.value(), 1)
        self.assertEqual(len(self.result), 2)

    def test_empty_result(self):
        result = QueryResult([], [], 0, 0, 10, "SELECT 1 WHERE 0", 0.0)

        self.assertIsNone(result.first())
        self.assertIsNone(result.value())
        self.assertFalse(result)


class TestQueryService(unittest.TestCase):
    """Test cases for QueryService against a SQLite file database."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_url = f"sqlite:///{os.path.join(self.temp_dir, 'sqlab_island.db')}"

        engine = sa.create_engine(self.db_url)
        with engine.begin() as conn:
            conn.execute(sa.text("CREATE TABLE villagers (id INTEGER PRIMARY KEY, name TEXT, answer_hash TEXT)"))
            conn.execute(sa.text("CREATE TABLE sqlab_msg (id INTEGER PRIMARY KEY, msg TEXT)"))
            conn.execute(sa.text("CREATE TABLE items (item TEXT)"))
            for i in range(1, 26):
                conn.execute(sa.text("INSERT INTO villagers (id, name, answer_hash) VALUES (:id, :name, :h)"),
                             {"id": i, "name": f"villager{i}", "h": f"h{i}"})
        engine.dispose()

        self.connection = DatabaseConnection(self.db_url, use_pool=False)
        self.service = QueryService(self.connection, data_dir=self.temp_dir)

    def tearDown(self):
        self.connection.disconnect()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_execute_query_paginates(self):
        result = self.service.execute_query("SELECT id, name FROM villagers ORDER BY id", offset="20", limit="10")

        self.assertEqual(result.total, 25)
        self.assertEqual((result.offset, result.limit), (20, 10))
        self.assertEqual([row[0] for row in result.rows], [21, 22, 23, 24, 25])

    def test_execute_query_coerces_bad_pagination(self):
        result = self.service.execute_query("SELECT id FROM villagers", offset="abc", limit="-1")

        self.assertEqual((result.offset, result.limit), (0, 10))
        self.assertEqual(len(result.rows), 10)

    def test_execute_query_clamps_limit(self):
        result = self.service.execute_query("SELECT id FROM villagers", limit=50000)

        self.assertEqual(result.limit, 1000)
        self.assertEqual(len(result.rows), 25)

    def test_execute_query_skip_pagination(self):
        result = self.service.execute_query("SELECT id FROM villagers", offset=5, limit=2, skip_pagination=True)

        self.assertEqual(len(result.rows), 25)
        self.assertEqual((result.offset, result.limit, result.total), (0, 25, 25))

    def test_execute_query_hides_hash_columns(self):
        result = self.service.execute_query("SELECT * FROM villagers WHERE id = 1")

        self.assertEqual(result.columns, ["id", "name"])
        self.assertEqual(result.rows, [[1, "villager1"]])

    def test_execute_query_keeps_hash_columns_when_asked(self):
        service = QueryService(self.connection, hide_hash_columns=False)
        result = service.execute_query("SELECT * FROM villagers WHERE id = 1")

        self.assertIn("answer_hash", result.columns)

    def test_execute_empty_query(self):
        with self.assertRaises(QueryError) as context:
            self.service.execute_query("  ")

        self.assertEqual(context.exception.get_user_message(), "Query cannot be empty")

    def test_execute_query_error(self):
        with self.assertRaises(QueryError) as context:
            self.service.execute_query("SELECT nope FROM villagers")

        self.assertIn("no such column", context.exception.get_user_message())

    def test_check_solution(self):
        result = self.service.check_solution("SELECT name FROM villagers WHERE id = 3", "id * 2 AS token")

        self.assertEqual(result.columns, ["name", "token"])
        self.assertEqual(result.rows, [["villager3", 6]])
        self.assertEqual(result.metadata["rewritten_query"],
                         "SELECT name, id * 2 AS token FROM villagers WHERE id = 3;")

    def test_check_solution_with_trailing_line_comment(self):
        result = self.service.check_solution("SELECT name -- who\nFROM villagers WHERE id = 3", "'ok' AS token")

        self.assertEqual(result.columns, ["name", "token"])
        self.assertEqual(result.rows, [["villager3", "ok"]])

    def test_check_solution_requires_formula(self):
        with self.assertRaises(QueryError):
            self.service.check_solution("SELECT name FROM villagers", "  ")

    def test_get_table_data(self):
        result = self.service.get_table_data("villagers", offset=10, limit=5)

        self.assertEqual(result.total, 25)
        self.assertEqual([row[0] for row in result.rows], [11, 12, 13, 14, 15])
        self.assertEqual(result.to_envelope(table_name="villagers")["table_name"], "villagers")

    def test_get_table_data_missing_table(self):
        with self.assertRaises(QueryError):
            self.service.get_table_data("nowhere")

    def test_get_table_columns(self):
        self.assertEqual(self.service.get_table_columns("villagers"), ["id", "name"])

    def test_list_tables_hides_system_tables(self):
        self.assertEqual(self.service.list_tables(), ["items", "villagers"])
        self.assertEqual(self.service.list_tables(include_system=True), ["items", "sqlab_msg", "villagers"])

    def test_get_database_info(self):
        info = self.service.get_database_info()

        self.assertEqual(info["name"], "sqlab_island")
        self.assertEqual(info["adventure"], "Island")
        self.assertEqual(info["host"], "localhost")

    def test_get_database_info_not_connected(self):
        schema = MagicMock()
        schema.get_database_info.side_effect = DatabaseConnectionError("refused")
        service = QueryService(MagicMock(), schema_retriever=schema)

        self.assertEqual(service.get_database_info(),
                         {"name": "Not connected", "host": "localhost", "adventure": "Unknown"})

    def test_tsv_files(self):
        with open(os.path.join(self.temp_dir, "prices.tsv"), "w", encoding="utf-8") as f:
            f.write("item\tprice\nrope\t3\nlamp\t\n")

        self.assertEqual(self.service.list_tsv_files(), ["prices"])

        result = self.service.get_tsv_data("prices", limit=1, offset=1)
        self.assertEqual(result.columns, ["item", "price"])
        self.assertEqual(result.rows, [["lamp", None]])
        self.assertEqual(result.total, 2)

    def test_tsv_without_data_dir(self):
        service = QueryService(self.connection)

        with self.assertRaises(QueryError):
            service.list_tsv_files()

    def test_uses_injected_executor(self):
        executor = MagicMock()
        executor.execute_script.return_value = StatementResult(columns=["a"], rows=[[1]], total=1)
        service = QueryService(MagicMock(), executor=executor)

        result = service.execute_query("SELECT a FROM t", offset=0, limit=5)

        self.assertEqual(result.rows, [[1]])
        executor.execute_script.assert_called_once()
        self.assertEqual(executor.execute_script.call_args[0][1].limit, 5)


if __name__ == '__main__':
    unittest.main()
