"""Tests for the CLI module."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from docsyrag.client.cli import count, delete, delete_db, index, init, search
from docsyrag.errors import ProviderError
from docsyrag.rag.models import ChunkFilter, SearchResult
from docsyrag.service.indexing import IndexingResult


@pytest.fixture(autouse=True)
def ravendb_env(monkeypatch):
    monkeypatch.setenv("RAVENDB_URL", "http://raven:8080")
    monkeypatch.setenv("RAVENDB_DATABASE", "testdb")


class TestInitCLI:
    """Tests for the init command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.VectorIndexClient")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_init_provisions_index(self, mock_db_exists, mock_index_class):
        mock_db_exists.return_value = True

        result = self.runner.invoke(init, [])

        assert result.exit_code == 0
        assert "Vector index ready" in result.output
        mock_index_class.return_value.__enter__.return_value.ensure_collection.assert_called_once()

    @patch("docsyrag.client.cli.VectorIndexClient")
    @patch("docsyrag.client.cli_helpers.create_database")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_init_creates_database(self, mock_db_exists, mock_create, mock_index_class):
        mock_db_exists.return_value = False

        result = self.runner.invoke(init, ["--create-database"])

        assert result.exit_code == 0
        assert "Database created successfully" in result.output
        mock_create.assert_called_once()

    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_init_without_database(self, mock_db_exists):
        mock_db_exists.return_value = False

        result = self.runner.invoke(init, [])

        assert result.exit_code != 0
        assert "docsyrag-init --create-database" in result.output

    def test_init_without_url(self, monkeypatch):
        monkeypatch.delenv("RAVENDB_URL")

        result = self.runner.invoke(init, [])

        assert result.exit_code != 0
        assert "RAVENDB_URL not configured" in result.output


class TestIndexCLI:
    """Tests for the index command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.asyncio.run")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_index_file(self, mock_db_exists, mock_async_run, tmp_path):
        mock_db_exists.return_value = True
        mock_async_run.return_value = IndexingResult(document_id="doc-1", chunks_stored=4)
        text_file = tmp_path / "paper.txt"
        text_file.write_text("Some extracted text. " * 100, encoding="utf-8")

        result = self.runner.invoke(
            index, [str(text_file), "--document-id", "doc-1", "--notebook-id", "nb-1"]
        )

        assert result.exit_code == 0
        assert "Stored 4 chunks for doc-1" in result.output
        mock_async_run.assert_called_once()
        mock_async_run.call_args.args[0].close()

    @patch("docsyrag.client.cli.asyncio.run")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_index_failure(self, mock_db_exists, mock_async_run, tmp_path):
        mock_db_exists.return_value = True

        def fail(coro):
            coro.close()
            raise ProviderError("embedding service down")

        mock_async_run.side_effect = fail
        text_file = tmp_path / "paper.txt"
        text_file.write_text("text", encoding="utf-8")

        result = self.runner.invoke(
            index, [str(text_file), "--document-id", "doc-1", "--notebook-id", "nb-1"]
        )

        assert result.exit_code != 0
        assert "embedding service down" in result.output

    def test_index_requires_ids(self, tmp_path):
        text_file = tmp_path / "paper.txt"
        text_file.write_text("text", encoding="utf-8")

        result = self.runner.invoke(index, [str(text_file)])

        assert result.exit_code != 0
        assert "--document-id" in result.output


class TestSearchCLI:
    """Tests for the search command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.asyncio.run")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_search_prints_results(self, mock_db_exists, mock_async_run):
        mock_db_exists.return_value = True
        mock_async_run.return_value = [
            SearchResult(
                id="c1",
                document_id="doc-1",
                content="Thrust comes from burning propellant.",
                score=0.9123,
                start_char=10,
                end_char=47,
                page_number=2,
                document_name="Rockets.pdf",
                chunk_index=0,
            )
        ]

        result = self.runner.invoke(search, ["thrust", "--notebook-id", "nb-1", "--limit", "3"])

        assert result.exit_code == 0
        assert "Found 1 result" in result.output
        assert "Rockets.pdf - chunk #0, page 2" in result.output
        assert "score: 0.9123" in result.output
        mock_async_run.call_args.args[0].close()

    @patch("docsyrag.client.cli.asyncio.run")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_search_no_results(self, mock_db_exists, mock_async_run):
        mock_db_exists.return_value = True
        mock_async_run.return_value = []

        result = self.runner.invoke(search, ["thrust", "--notebook-id", "nb-1"])

        assert result.exit_code == 0
        assert "No results found" in result.output
        mock_async_run.call_args.args[0].close()


class TestDeleteCLI:
    """Tests for the delete command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.VectorIndexClient")
    def test_delete_document(self, mock_index_class):
        index_client = mock_index_class.return_value.__enter__.return_value
        index_client.delete_by_filter.return_value = 3

        result = self.runner.invoke(delete, ["--document-id", "doc-1"])

        assert result.exit_code == 0
        assert "Deleted 3 chunk(s) for document doc-1" in result.output
        index_client.delete_by_filter.assert_called_once_with(ChunkFilter(document_id="doc-1"))

    @patch("docsyrag.client.cli.VectorIndexClient")
    def test_delete_notebook(self, mock_index_class):
        index_client = mock_index_class.return_value.__enter__.return_value
        index_client.delete_by_filter.return_value = 7

        result = self.runner.invoke(delete, ["--notebook-id", "nb-1"])

        assert result.exit_code == 0
        index_client.delete_by_filter.assert_called_once_with(ChunkFilter(notebook_id="nb-1"))

    @pytest.mark.parametrize("args", [[], ["--document-id", "d", "--notebook-id", "n"]])
    def test_delete_requires_exactly_one_target(self, args):
        result = self.runner.invoke(delete, args)
        assert result.exit_code != 0
        assert "exactly one" in result.output


class TestCountCLI:
    """Tests for the count command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.VectorIndexClient")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_count(self, mock_db_exists, mock_index_class):
        mock_db_exists.return_value = True
        mock_index_class.return_value.__enter__.return_value.count.return_value = 42

        result = self.runner.invoke(count, ["--notebook-id", "nb-1"])

        assert result.exit_code == 0
        assert "42 chunk(s)" in result.output

    @patch("docsyrag.client.cli.VectorIndexClient")
    @patch("docsyrag.client.cli_helpers.database_exists")
    def test_count_error(self, mock_db_exists, mock_index_class):
        mock_db_exists.return_value = True
        mock_index_class.return_value.__enter__.return_value.count.side_effect = ProviderError(
            "unreachable"
        )

        result = self.runner.invoke(count, [])

        assert result.exit_code != 0
        assert "Error counting chunks" in result.output


class TestDeleteDbCLI:
    """Tests for the delete-db command."""

    def setup_method(self):
        self.runner = CliRunner()

    @patch("docsyrag.client.cli.delete_database")
    @patch("docsyrag.client.cli.database_exists")
    def test_delete_db_with_yes(self, mock_db_exists, mock_delete):
        mock_db_exists.return_value = True

        result = self.runner.invoke(delete_db, ["--yes"])

        assert result.exit_code == 0
        assert "successfully deleted" in result.output
        mock_delete.assert_called_once()

    @patch("docsyrag.client.cli.delete_database")
    @patch("docsyrag.client.cli.database_exists")
    def test_delete_db_cancelled(self, mock_db_exists, mock_delete):
        mock_db_exists.return_value = True

        result = self.runner.invoke(delete_db, [], input="n\n")

        assert "Deletion cancelled" in result.output
        mock_delete.assert_not_called()

    @patch("docsyrag.client.cli.database_exists")
    def test_delete_db_missing(self, mock_db_exists):
        mock_db_exists.return_value = False

        result = self.runner.invoke(delete_db, ["--yes"])

        assert result.exit_code == 0
        assert "does not exist" in result.output
