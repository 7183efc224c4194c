"""Interactive command loop for the query engine.

Reads one statement per line, executes it and prints the outcome:

- SELECT prints the result table: a tab-separated header line of
  attribute names followed by one tab-separated line per row.
- INSERT and DELETE print an ``OK:`` message.
- Rejected statements print ``Invalid Query: <message>`` to stderr.
- Applied statements whose write to disk failed also print a warning to
  stderr.

``exit``, ``quit``, ``\\q`` or end of input ends the loop.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from query_engine.adapters.inbound.sql_parser import StatementType
from query_engine.application import DatabaseEngine, ExecutionResult
from query_engine.domain.entities import Table
from query_engine.domain.services import format_value

PROMPT = "$ "
EXIT_COMMANDS = frozenset({"exit", "quit", r"\q"})


def format_table(table: Table) -> str:
    """Render a table as tab-separated lines, header first."""
    lines = ["\t".join(table.schema.names)]
    for row in table:
        lines.append("\t".join(format_value(value) for value in row))
    return "\n".join(lines)


class QueryRepl:
    """Line-oriented front end over a started DatabaseEngine."""

    def __init__(
        self,
        engine: DatabaseEngine,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        prompt: str = PROMPT,
    ) -> None:
        self._engine = engine
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._prompt = prompt

    def run(self) -> int:
        """Read and execute statements until exit or end of input.

        Returns:
            Process exit status (always 0).
        """
        while True:
            self._stdout.write(self._prompt)
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                self._stdout.write("\n")
                return 0
            if not self.handle_line(line):
                return 0

    def handle_line(self, line: str) -> bool:
        """Execute one input line.

        Returns:
            False if the line asks to leave the loop, True otherwise.
        """
        text = line.strip()
        if not text:
            return True
        if text.lower() in EXIT_COMMANDS:
            return False
        self.print_result(self._engine.execute(text))
        return True

    def run_statement(self, sql: str) -> int:
        """Execute a single statement and report it.

        Returns:
            0 if the statement succeeded, 1 otherwise.
        """
        result = self._engine.execute(sql)
        self.print_result(result)
        return 0 if result.success and result.persisted else 1

    def run_file(self, path: Path) -> int:
        """Execute every non-empty line of ``path`` as a statement.

        Lines starting with ``--`` are comments.

        Returns:
            0 if every statement succeeded, 1 otherwise.
        """
        status = 0
        with open(path, encoding="utf-8") as f:
            for line in f:
                text = line.strip()
                if not text or text.startswith("--"):
                    continue
                if self.run_statement(text) != 0:
                    status = 1
        return status

    def print_result(self, result: ExecutionResult) -> None:
        if result.error is not None:
            print(f"Invalid Query: {result.error.message}", file=self._stderr)
            return

        if result.statement_type is StatementType.SELECT and result.table is not None:
            print(format_table(result.table), file=self._stdout)
        else:
            print(result.message, file=self._stdout)

        if not result.persisted:
            print("Warning: the change was applied in memory but not written to disk",
                  file=self._stderr)


def run_repl(engine: DatabaseEngine) -> int:
    """Run the interactive loop on the process's standard streams."""
    return QueryRepl(engine).run()
