from __future__ import annotations

from datetime import time, timedelta

from src.internship_attendance.internship_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from src.internship_attendance.internship_attendance.database.mysql_base import normalize_mysql_time


def test_statements_split_outside_quotes_and_comments():
    sql = """
    -- companies; keep this comment out
    CREATE TABLE a (id INT);
    INSERT INTO a VALUES ('x;y');
    INSERT INTO b VALUES ("it\\"s");
    """

    stmts = list(iter_sql_statements(sql))

    assert stmts == [
        "CREATE TABLE a (id INT)",
        "INSERT INTO a VALUES ('x;y')",
        'INSERT INTO b VALUES ("it\\"s")',
    ]


def test_database_selection_is_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\nCREATE TABLE t (id INT);\n"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_time_columns_normalize_from_timedelta():
    assert normalize_mysql_time(timedelta(hours=7, minutes=45)) == time(7, 45)
    assert normalize_mysql_time(time(12, 45)) == time(12, 45)
    assert normalize_mysql_time("07:45:00") == "07:45:00"
    assert normalize_mysql_time(None) is None
