import json
import logging

import pytest
from sqlalchemy import create_engine
from typer.testing import CliRunner

from querydump.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'people.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE people (id INTEGER, name TEXT)")
        conn.exec_driver_sql("INSERT INTO people VALUES (1, 'Alice'), (2, 'O''Brien'), (3, NULL)")
    engine.dispose()
    return url


QUERY = "SELECT id, name FROM people ORDER BY id"


def test_json(db_url, tmp_path):
    out = tmp_path / "out.json"
    result = runner.invoke(app, ["--url", db_url, "-e", QUERY, "-f", "json", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()] == [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "O'Brien"},
        {"id": 3, "name": None},
    ]


def test_sql(db_url, tmp_path):
    out = tmp_path / "out.sql"
    result = runner.invoke(
        app, ["--url", db_url, "-e", QUERY, "-f", "sql", "-a", "people_copy", "-i", "-U", "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert text.startswith("SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT;\nSET NAMES utf8;\n\n")
    assert "INSERT IGNORE INTO `people_copy` (`id`, `name`) VALUES\n" in text
    assert "(1, 'Alice'),\n(2, 'O\\'Brien'),\n(3, NULL)\nON DUPLICATE KEY UPDATE\n" in text


def test_query_from_stdin(db_url, tmp_path):
    out = tmp_path / "out.csv"
    result = runner.invoke(app, ["--url", db_url, "--csv-header", "-o", str(out)], input=QUERY)
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "id,name\n1,Alice\n2,O'Brien\n3,\n"


def test_sql_without_alias_fails(db_url, tmp_path):
    out = tmp_path / "out.sql"
    result = runner.invoke(app, ["--url", db_url, "-e", QUERY, "-f", "sql", "-o", str(out)])
    assert result.exit_code == 1
    assert "Alias must be specified" in result.output
    assert not out.exists()


def test_bad_query_fails(db_url, tmp_path):
    result = runner.invoke(app, ["--url", db_url, "-e", "SELECT nope FROM nowhere", "-o", str(tmp_path / "x")])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_empty_query_fails(db_url):
    result = runner.invoke(app, ["--url", db_url], input="  \n")
    assert result.exit_code == 1
    assert "No query given" in result.output
