# tests/unit/database/test_tsv_source.py
import os
import shutil
import tempfile
import unittest

from sqlab.core.exceptions.custom_exceptions import QueryError
from sqlab.database.tsv_source import TsvDataSource
from sqlab.pagination.params import PaginationParams


class TestTsvDataSource(unittest.TestCase):
    """Test cases for TSV reference tables."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        with open(os.path.join(self.temp_dir, "fish.tsv"), "w", encoding="utf-8") as f:
            f.write("species\tweight\tnote\n")
            for i in range(1, 13):
                f.write(f"fish{i}\t{i}.5\t{'rare' if i == 3 else ''}\n")
        with open(os.path.join(self.temp_dir, "notes.txt"), "w", encoding="utf-8") as f:
            f.write("not a table")

        self.source = TsvDataSource(self.temp_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_list_files(self):
        self.assertEqual(self.source.list_files(), ["fish"])

    def test_missing_directory(self):
        with self.assertRaises(QueryError):
            TsvDataSource(os.path.join(self.temp_dir, "missing")).list_files()

    def test_get_page(self):
        result = self.source.get_page("fish", PaginationParams(offset=10, limit=10))

        self.assertEqual(result.columns, ["species", "weight", "note"])
        self.assertEqual(result.total, 12)
        self.assertEqual(result.rows, [["fish11", "11.5", None], ["fish12", "12.5", None]])

    def test_values_stay_text(self):
        result = self.source.get_page("fish", PaginationParams(offset=2, limit=1))

        self.assertEqual(result.rows, [["fish3", "3.5", "rare"]])

    def test_quote_characters_are_kept(self):
        with open(os.path.join(self.temp_dir, "mottos.tsv"), "w", encoding="utf-8") as f:
            f.write("name\tmotto\n\"Old\" Pete\tsays \"hi\n")

        result = self.source.get_page("mottos", PaginationParams())

        self.assertEqual(result.rows, [['"Old" Pete', 'says "hi']])

    def test_missing_file(self):
        with self.assertRaises(QueryError) as context:
            self.source.get_page("whales", PaginationParams())

        self.assertEqual(context.exception.get_user_message(), "TSV file 'whales' not found")

    def test_path_escape_rejected(self):
        with self.assertRaises(QueryError):
            self.source.get_page("../fish", PaginationParams())

    def test_reload_after_change(self):
        self.source.get_page("fish", PaginationParams())
        path = os.path.join(self.temp_dir, "fish.tsv")
        with open(path, "w", encoding="utf-8") as f:
            f.write("species\nsalmon\n")
        stat = os.stat(path)
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))

        result = self.source.get_page("fish", PaginationParams())
        self.assertEqual(result.rows, [["salmon"]])


if __name__ == '__main__':
    unittest.main()
