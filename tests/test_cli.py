"""Tests for the command-line interface."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sql2pinecone._migrator import MigrationSummary
from sql2pinecone.cli import app
from sql2pinecone.config import ENV_VARS, MigrationConfig
from sql2pinecone.pipeline.batching import TableStats

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    with patch("sql2pinecone.cli.load_dotenv"):
        yield


def _summary() -> MigrationSummary:
    return MigrationSummary(
        tables={
            "users": TableStats(table="users", rows_read=3, rows_skipped=1, batch_sizes=[2]),
            "logs": TableStats(table="logs", skip_reason="No primary key found."),
        }
    )


class TestMigrateCommand:
    def test_runs_with_options(self):
        with patch("sql2pinecone.cli.run", return_value=_summary()) as mock_run:
            result = runner.invoke(
                app,
                [
                    "migrate",
                    "--index",
                    "rows",
                    "--dialect",
                    "pg",
                    "--connection-string",
                    "postgres://u@db/app",
                    "--api-key",
                    "pc-key",
                    "--batch-size",
                    "25",
                ],
            )
        assert result.exit_code == 0, result.output
        config = mock_run.call_args.args[0]
        assert config.index_name == "rows"
        assert config.dialect == "pg"
        assert config.batch_size == 25
        assert config.embedding_text_field == "text"
        assert "Migrated 2 records" in result.output

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PINECONE_API_KEY", "env-key")
        monkeypatch.setenv("PINECONE_INDEX_NAME", "env-index")
        monkeypatch.setenv("SQL_DIALECT", "sqlite")
        monkeypatch.setenv("SQLITE_DB_FILE", "app.db")
        with patch("sql2pinecone.cli.run", return_value=MigrationSummary()) as mock_run:
            result = runner.invoke(app, ["migrate", "--text-field", "chunk_text"])
        assert result.exit_code == 0, result.output
        assert mock_run.call_args.args[0] == MigrationConfig(
            dialect="sqlite",
            sqlite_file="app.db",
            pinecone_api_key="env-key",
            index_name="env-index",
            embedding_text_field="chunk_text",
        )

    def test_missing_api_key(self):
        with patch("sql2pinecone.cli.run") as mock_run:
            result = runner.invoke(app, ["migrate", "--index", "rows", "--dialect", "sqlite"])
        assert result.exit_code == 1
        assert "API key" in result.output
        mock_run.assert_not_called()

    def test_bad_batch_size_env(self, monkeypatch):
        monkeypatch.setenv("BATCH_SIZE", "lots")
        result = runner.invoke(app, ["migrate"])
        assert result.exit_code == 1
        assert "BATCH_SIZE" in result.output

    def test_migration_failure(self):
        with patch("sql2pinecone.cli.run", side_effect=RuntimeError("boom")):
            result = runner.invoke(
                app,
                ["migrate", "-i", "rows", "-d", "sqlite", "--api-key", "pc-key"],
            )
        assert result.exit_code == 1
        assert "Migration failed: boom" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "migrate" in result.output
