# tests/integration/web_interface/test_api_integration.py
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import sqlalchemy as sa
from fastapi.testclient import TestClient

from sqlab.config.app_config import SQLabConfig
from sqlab.database.connection import DatabaseConnection
from sqlab.web_interface.app import app
from sqlab.web_interface.dependencies import get_app_config, get_db_connection


class TestApiIntegration(unittest.TestCase):
    """End-to-end tests of the HTTP API over a SQLite database."""

    @classmethod
    def setUpClass(cls):
        cls.temp_dir = tempfile.mkdtemp()
        cls.db_url = f"sqlite:///{os.path.join(cls.temp_dir, 'sqlab_island.db')}"

        engine = sa.create_engine(cls.db_url)
        with engine.begin() as conn:
            conn.execute(sa.text("CREATE TABLE villagers (id INTEGER PRIMARY KEY, name TEXT, answer_hash TEXT)"))
            conn.execute(sa.text("CREATE TABLE sqlab_msg (id INTEGER PRIMARY KEY, msg TEXT)"))
            for i in range(1, 26):
                conn.execute(sa.text("INSERT INTO villagers (id, name, answer_hash) VALUES (:id, :name, :h)"),
                             {"id": i, "name": f"villager{i}", "h": f"h{i}"})
        engine.dispose()

        with open(os.path.join(cls.temp_dir, "fish.tsv"), "w", encoding="utf-8") as f:
            f.write("species\tweight\nsalmon\t4\ntrout\t\n")

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.temp_dir, ignore_errors=True)

    def setUp(self):
        db_url = self.db_url
        temp_dir = self.temp_dir

        def override_db_connection():
            connection = DatabaseConnection(db_url, use_pool=False)
            try:
                yield connection
            finally:
                connection.disconnect()

        def override_app_config():
            config = SQLabConfig()
            config.set('data_dir', temp_dir)
            return config

        app.dependency_overrides[get_db_connection] = override_db_connection
        app.dependency_overrides[get_app_config] = override_app_config
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_database_info(self):
        response = self.client.get("/database-info")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "sqlab_island")
        self.assertEqual(response.json()["adventure"], "Island")

    def test_list_tables(self):
        response = self.client.get("/list-tables")

        self.assertEqual(response.json(), {"tables": ["villagers"]})

    def test_table_data_last_page(self):
        response = self.client.get("/table-data/villagers", params={"offset": "20", "limit": "10"})
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["total"], 25)
        self.assertEqual((body["offset"], body["limit"]), (20, 10))
        self.assertEqual([row[0] for row in body["rows"]], [21, 22, 23, 24, 25])
        self.assertEqual(body["table_name"], "villagers")

    def test_table_data_bad_pagination_is_coerced(self):
        response = self.client.get("/table-data/villagers", params={"offset": "abc", "limit": "-4"})
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual((body["offset"], body["limit"]), (0, 10))
        self.assertEqual(len(body["rows"]), 10)

    def test_table_data_missing_table(self):
        response = self.client.get("/table-data/nowhere")

        self.assertEqual(response.status_code, 400)
        self.assertIn("no such table", response.json()["error"])

    def test_table_columns(self):
        response = self.client.get("/table-columns/villagers")

        self.assertEqual(response.json(), {"table_name": "villagers", "columns": ["id", "name"]})

    def test_execute_query(self):
        response = self.client.post("/execute-query", json={
            "query": "SELECT id, name FROM villagers ORDER BY id DESC",
            "offset": "10",
            "limit": 5
        })
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["columns"], ["id", "name"])
        self.assertEqual([row[0] for row in body["rows"]], [15, 14, 13, 12, 11])
        self.assertEqual((body["total"], body["offset"], body["limit"]), (25, 10, 5))

    def test_execute_query_hides_hash_columns(self):
        response = self.client.post("/execute-query", json={"query": "SELECT * FROM villagers WHERE id = 1"})

        self.assertEqual(response.json()["columns"], ["id", "name"])

    def test_execute_query_error(self):
        response = self.client.post("/execute-query", json={"query": "SELECT nope FROM villagers"})

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["error"].startswith("Database error: "))

    def test_execute_query_without_query(self):
        response = self.client.post("/execute-query", json={"offset": 0})

        self.assertEqual(response.status_code, 400)
        self.assertIn("query", response.json()["error"])

    def test_check_query(self):
        response = self.client.post("/check-query", json={
            "query": "SELECT name FROM villagers WHERE id = 2",
            "formula": "id + 100 AS token"
        })
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["columns"], ["name", "token"])
        self.assertEqual(body["rows"], [["villager2", 102]])
        self.assertEqual(body["rewritten_query"], "SELECT name, id + 100 AS token FROM villagers WHERE id = 2;")

    def test_check_query_without_formula(self):
        response = self.client.post("/check-query", json={"query": "SELECT name FROM villagers"})

        self.assertEqual(response.status_code, 400)

    def test_tsv(self):
        self.assertEqual(self.client.get("/list-tsv-files").json(), {"tables": ["fish"]})

        body = self.client.get("/tsv-data/fish").json()
        self.assertEqual(body["columns"], ["species", "weight"])
        self.assertEqual(body["rows"], [["salmon", "4"], ["trout", None]])
        self.assertEqual(body["total"], 2)

    def test_tsv_missing(self):
        response = self.client.get("/tsv-data/whales")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "TSV file 'whales' not found"})


class TestApiWithoutDatabase(unittest.TestCase):
    """Behavior when the database cannot be reached."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        unreachable = f"sqlite:///{os.path.join(self.temp_dir, 'missing', 'db.sqlite')}"

        def override_db_connection():
            connection = DatabaseConnection(unreachable, use_pool=False)
            try:
                yield connection
            finally:
                connection.disconnect()

        app.dependency_overrides[get_db_connection] = override_db_connection
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_list_tables_unavailable(self):
        response = self.client.get("/list-tables")

        self.assertEqual(response.status_code, 503)
        self.assertIn("Unable to connect to database", response.json()["error"])

    def test_database_info_placeholder(self):
        response = self.client.get("/database-info")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Not connected")
        self.assertEqual(response.json()["adventure"], "Unknown")


class TestApiLifespan(unittest.TestCase):

    def test_shutdown_disposes_engines(self):
        with patch("sqlab.web_interface.app.dispose_global_connection_pool") as dispose:
            with TestClient(app) as client:
                self.assertEqual(client.get("/health").status_code, 200)
                dispose.assert_not_called()

        dispose.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
