from meeting_checkin.database.bootstrap import (
    DEFAULT_SCHEMA_PATH,
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)


def test_split_statements_respects_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\";\nSELECT 'it\\'s';"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'SELECT "x;y"',
        "SELECT 'it\\'s'",
    ]


def test_trailing_statement_without_semicolon():
    assert list(iter_sql_statements("SELECT 1; SELECT 2")) == ["SELECT 1", "SELECT 2"]


def test_strip_create_database_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\nCREATE TABLE t (id INT);"

    assert _strip_create_db_and_use(sql).strip() == "CREATE TABLE t (id INT);"


def test_strip_line_comments():
    assert _strip_line_comments("-- heading\nSELECT 1;\n  -- note\n") == "SELECT 1;"


def test_schema_file_creates_every_table():
    sql = _strip_line_comments(_strip_create_db_and_use(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))
    created = [s.split("(")[0].split()[-1].strip("`") for s in statements if s.upper().startswith("CREATE TABLE")]

    assert sorted(created) == [
        "meetings",
        "properties",
        "property_transfers",
        "shareholders",
        "snapshots",
        "undo_requests",
    ]
