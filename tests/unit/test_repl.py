"""Unit tests for the interactive command loop."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from query_engine.adapters.inbound.repl import QueryRepl, format_table
from query_engine.application import DatabaseEngine


def make_repl(engine: DatabaseEngine, text: str = "") -> tuple[QueryRepl, io.StringIO, io.StringIO]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    return QueryRepl(engine, stdin=io.StringIO(text), stdout=stdout, stderr=stderr), stdout, stderr


@pytest.mark.unit
class TestQueryRepl:
    """Tests for QueryRepl."""

    def test_select_prints_table(self, engine: DatabaseEngine) -> None:
        repl, stdout, stderr = make_repl(engine, "SELECT name FROM Students WHERE age >= 18\nexit\n")

        assert repl.run() == 0
        assert stdout.getvalue() == "$ name\nAlice\nCarol\n$ "
        assert stderr.getvalue() == ""

    def test_end_of_input_exits(self, engine: DatabaseEngine) -> None:
        repl, stdout, _ = make_repl(engine, "")

        assert repl.run() == 0
        assert stdout.getvalue() == "$ \n"

    @pytest.mark.parametrize("command", ["exit", "QUIT", r"\q", "  exit  "])
    def test_exit_commands(self, engine: DatabaseEngine, command: str) -> None:
        repl, stdout, _ = make_repl(engine, f"{command}\nSELECT name FROM Students\n")

        assert repl.run() == 0
        assert stdout.getvalue() == "$ "

    def test_blank_lines_are_skipped(self, engine: DatabaseEngine) -> None:
        repl, stdout, _ = make_repl(engine, "\n   \nexit\n")

        repl.run()

        assert stdout.getvalue() == "$ $ $ "

    def test_error_goes_to_stderr(self, engine: DatabaseEngine) -> None:
        repl, stdout, stderr = make_repl(engine, "SELECT ghost FROM Students\n")

        repl.run()

        assert stderr.getvalue() == "Invalid Query: Unknown attribute: ghost\n"
        assert stdout.getvalue() == "$ $ \n"

    def test_duplicate_column_is_reported(self, engine: DatabaseEngine) -> None:
        repl, stdout, stderr = make_repl(engine, "SELECT name, name FROM Students\nSELECT sid FROM Students\n")

        assert repl.run() == 0
        assert stderr.getvalue() == "Invalid Query: Duplicate attribute: name\n"
        assert "sid\ns1\ns2\ns3\n" in stdout.getvalue()

    def test_loop_continues_after_error(self, engine: DatabaseEngine) -> None:
        repl, stdout, _ = make_repl(
            engine,
            "SELECT FROM Students\nDELETE FROM Students WHERE age < 18\nexit\n",
        )

        repl.run()

        assert "OK: 1 row deleted from Students\n" in stdout.getvalue()
        assert len(engine.catalog.resolve("Students")) == 2

    def test_insert_message(self, engine: DatabaseEngine) -> None:
        repl, stdout, _ = make_repl(engine)

        status = repl.run_statement("INSERT INTO Students (sid, name, age) VALUES ('s4', 'Dave', 19)")

        assert status == 0
        assert stdout.getvalue() == "OK: 1 row inserted into Students\n"

    def test_run_statement_status_on_error(self, engine: DatabaseEngine) -> None:
        repl, _, stderr = make_repl(engine)

        assert repl.run_statement("SELECT name FROM Professors") == 1
        assert stderr.getvalue() == "Invalid Query: Table not found: Professors\n"

    def test_run_file(self, engine: DatabaseEngine, tmp_path: Path) -> None:
        script = tmp_path / "script.sql"
        script.write_text(
            "-- remove minors\n"
            "DELETE FROM Students WHERE age < 18\n"
            "\n"
            "SELECT sid FROM Students\n"
        )
        repl, stdout, _ = make_repl(engine)

        assert repl.run_file(script) == 0
        assert stdout.getvalue() == "OK: 1 row deleted from Students\nsid\ns1\ns3\n"

    def test_run_file_reports_failure(self, engine: DatabaseEngine, tmp_path: Path) -> None:
        script = tmp_path / "script.sql"
        script.write_text("SELECT nope FROM Students\nSELECT sid FROM Students WHERE sid = 's1'\n")
        repl, stdout, _ = make_repl(engine)

        assert repl.run_file(script) == 1
        assert stdout.getvalue() == "sid\ns1\n"

    def test_persistence_warning(self, failing_gateway) -> None:
        db = DatabaseEngine(failing_gateway)
        db.start()
        repl, stdout, stderr = make_repl(db)

        status = repl.run_statement("DELETE FROM Students WHERE age > 18")

        assert status == 1
        assert stdout.getvalue().startswith("OK: 2 rows deleted from Students (not persisted:")
        assert "not written to disk" in stderr.getvalue()
        db.stop()


@pytest.mark.unit
class TestFormatTable:
    """Tests for format_table."""

    def test_real_values(self, engine: DatabaseEngine) -> None:
        courses = engine.catalog.resolve("Courses")

        assert format_table(courses) == "cid\ttitle\tcredits\nc1\tDatabases\t7.5\nc2\tCompilers\t5.0"

    def test_empty_result_is_header_only(self, engine: DatabaseEngine) -> None:
        result = engine.execute("SELECT name, age FROM Students WHERE age > 100")

        assert format_table(result.table) == "name\tage"
