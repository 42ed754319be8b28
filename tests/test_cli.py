"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dbdiff import __version__
from dbdiff_cli.main import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the CLI from an empty working directory with no DBDIFF_ settings"""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("DBDIFF_ConnectionStrings__Default", raising=False)
    monkeypatch.delenv("DBDIFF_Export__OutputPath", raising=False)
    return work


def test_cli_help() -> None:
    """Test CLI help command."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "export" in result.stdout


def test_cli_version() -> None:
    """Test CLI version command."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"dbdiff version {__version__}" in result.stdout


def test_export_help() -> None:
    """Test export help command."""
    result = runner.invoke(app, ["export", "--help"])
    assert result.exit_code == 0
    assert "--connection" in result.stdout
    assert "--ignore-position" in result.stdout


def test_export_sqlite(workdir: Path, sqlite_db: Path) -> None:
    """Test exporting a SQLite schema to a file."""
    result = runner.invoke(
        app,
        ["export", "-c", f"Data Source={sqlite_db}", "-d", "sqlite", "-o", "schemas/shop.txt"],
    )

    assert result.exit_code == 0, result.output
    output_file = workdir / "schemas" / "shop.txt"
    assert output_file.exists()
    assert "Successfully exported schema" in result.stdout
    assert "Tables exported" in result.stdout

    content = output_file.read_text(encoding="utf-8")
    assert "TABLE: sqlite.users" in content
    assert "OrdinalPosition: 0" in content


def test_export_default_output_path(workdir: Path, sqlite_db: Path) -> None:
    """Test that schema.txt in the working directory is the default output."""
    result = runner.invoke(app, ["export", "-c", f"sqlite:///{sqlite_db}"])

    assert result.exit_code == 0, result.output
    assert (workdir / "schema.txt").exists()


def test_export_formatting_flags(workdir: Path, sqlite_db: Path) -> None:
    """Test --ignore-position and --exclude-view-definitions."""
    result = runner.invoke(
        app,
        ["export", "-c", f"sqlite:///{sqlite_db}", "--ignore-position", "--exclude-view-definitions"],
    )

    assert result.exit_code == 0, result.output
    content = (workdir / "schema.txt").read_text(encoding="utf-8")
    assert "OrdinalPosition" not in content
    assert "DEFINITION:" not in content


def test_export_writes_log_file(workdir: Path, sqlite_db: Path) -> None:
    """Test that the export is logged to logs/dbdiff.log."""
    result = runner.invoke(app, ["export", "-c", f"sqlite:///{sqlite_db}"])

    assert result.exit_code == 0, result.output
    log_text = (workdir / "logs" / "dbdiff.log").read_text(encoding="utf-8")
    assert "Schema exported successfully" in log_text
    assert "[INF]" in log_text


def test_export_connection_from_config(workdir: Path, sqlite_db: Path) -> None:
    """Test that the connection string and options can come from a config file."""
    config = workdir / "export.json"
    config.write_text(
        json.dumps(
            {
                "ConnectionStrings": {"Default": f"Data Source={sqlite_db}"},
                "Export": {"OutputPath": "from-config.txt", "DatabaseType": "sqlite"},
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["export", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert (workdir / "from-config.txt").exists()


def test_export_connection_from_environment(workdir: Path, sqlite_db: Path) -> None:
    """Test the DBDIFF_ConnectionStrings__Default environment variable."""
    result = runner.invoke(
        app,
        ["export", "-o", "env.txt"],
        env={"DBDIFF_ConnectionStrings__Default": f"sqlite:///{sqlite_db}"},
    )

    assert result.exit_code == 0, result.output
    assert (workdir / "env.txt").exists()


def test_export_without_connection_string(workdir: Path) -> None:
    """Test that a missing connection string is reported with a hint."""
    result = runner.invoke(app, ["export"])

    assert result.exit_code == 1
    assert "Connection string is required" in result.output
    assert "--connection" in result.output


def test_export_to_system_directory(workdir: Path, sqlite_db: Path) -> None:
    """Test that writing into a system directory is refused."""
    result = runner.invoke(app, ["export", "-c", f"sqlite:///{sqlite_db}", "-o", "/etc/schema.txt"])

    assert result.exit_code == 1
    assert "Security Error" in result.output


def test_export_outside_allowed_base(workdir: Path, sqlite_db: Path, tmp_path: Path) -> None:
    """Test that --allowed-base confines the output path."""
    result = runner.invoke(
        app,
        [
            "export",
            "-c",
            f"sqlite:///{sqlite_db}",
            "-o",
            str(tmp_path / "outside.txt"),
            "--allowed-base",
            str(workdir),
        ],
    )

    assert result.exit_code == 1
    assert "Security Error" in result.output
    assert not (tmp_path / "outside.txt").exists()


def test_export_config_outside_working_directory(workdir: Path, tmp_path: Path) -> None:
    """Test that config files must live under the working directory."""
    config = tmp_path / "elsewhere.json"
    config.write_text("{}", encoding="utf-8")

    result = runner.invoke(app, ["export", "--config", str(config)])

    assert result.exit_code == 1
    assert "Invalid configuration file" in result.output


def test_export_missing_config(workdir: Path) -> None:
    """Test that a missing config file is reported."""
    result = runner.invoke(app, ["export", "--config", "missing.json"])

    assert result.exit_code == 1
    assert "Invalid configuration file" in result.output


def test_export_failure_exit_code(workdir: Path) -> None:
    """Test that a failed export exits with status 1 and writes nothing."""
    result = runner.invoke(app, ["export", "-c", f"Data Source={workdir / 'missing.db'}", "-d", "sqlite"])

    assert result.exit_code == 1
    assert "Export failed" in result.output
    assert not (workdir / "schema.txt").exists()
