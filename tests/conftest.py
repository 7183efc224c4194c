"""Pytest configuration and fixtures for query_engine tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from query_engine.adapters.outbound import CsvPersistenceGateway
from query_engine.application import DatabaseEngine
from query_engine.domain.entities import Catalog, Row, Schema, Table
from query_engine.domain.value_objects import AttributeType, IntegerValue, TextValue
from query_engine.infrastructure.config import Config, StorageConfig
from query_engine.infrastructure.metrics import MetricsRegistry
from query_engine.ports.outbound import PersistenceError

SCHEMA_TEXT = """\
# Test database
Students(sid:Text, name:Text, age:Integer)

Courses(cid:Text, title:Text, credits:Real)
"""

STUDENTS_CSV = "s1,Alice,20\ns2,Bob,17\ns3,Carol,22\n"
COURSES_CSV = "c1,Databases,7.5\nc2,Compilers,5.0\n"


class RecordingGateway:
    """In-memory PersistenceGateway that records every write."""

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog or Catalog()
        self.appended: list[tuple[str | None, tuple[Any, ...]]] = []
        self.rewritten: list[tuple[str | None, list[tuple[Any, ...]]]] = []

    def load_catalog(self) -> Catalog:
        return self.catalog

    def append_row(self, table: Table, row: Row) -> None:
        self.appended.append((table.name, row.as_python()))

    def rewrite_table(self, table: Table) -> None:
        self.rewritten.append((table.name, [row.as_python() for row in table.rows]))


class FailingGateway(RecordingGateway):
    """Gateway whose writes always fail."""

    def append_row(self, table: Table, row: Row) -> None:
        raise PersistenceError("disk full", f"/data/{table.name}.csv")

    def rewrite_table(self, table: Table) -> None:
        raise OSError(28, "No space left on device")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Data directory with a schema file and no table files."""
    path = temp_dir / "db"
    path.mkdir()
    (path / "schema.txt").write_text(SCHEMA_TEXT)
    return path


@pytest.fixture
def populated_dir(data_dir: Path) -> Path:
    """Data directory with three students and two courses."""
    (data_dir / "Students.csv").write_text(STUDENTS_CSV)
    (data_dir / "Courses.csv").write_text(COURSES_CSV)
    return data_dir


@pytest.fixture
def test_config(populated_dir: Path) -> Config:
    """Provide a test configuration over the populated data directory."""
    return Config(
        storage=StorageConfig(
            data_dir=populated_dir,
            sync_writes=False,  # Faster for tests
        ),
    )


@pytest.fixture
def collector_registry() -> CollectorRegistry:
    return CollectorRegistry(auto_describe=True)


@pytest.fixture
def metrics_registry(collector_registry: CollectorRegistry) -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    return MetricsRegistry(registry=collector_registry)


@pytest.fixture
def students_schema() -> Schema:
    return Schema.of(
        ("sid", AttributeType.TEXT),
        ("name", AttributeType.TEXT),
        ("age", AttributeType.INTEGER),
    )


@pytest.fixture
def make_student(students_schema: Schema) -> Callable[[str, str, int], Row]:
    """Factory for Students rows."""

    def make(sid: str, name: str, age: int) -> Row:
        return Row.build(students_schema, [TextValue(sid), TextValue(name), IntegerValue(age)])

    return make


@pytest.fixture
def students_table(students_schema: Schema, make_student: Callable[..., Row]) -> Table:
    return Table(
        "Students",
        students_schema,
        [
            make_student("s1", "Alice", 20),
            make_student("s2", "Bob", 17),
            make_student("s3", "Carol", 22),
        ],
    )


@pytest.fixture
def catalog(students_table: Table) -> Catalog:
    return Catalog([students_table])


@pytest.fixture
def recording_gateway(catalog: Catalog) -> RecordingGateway:
    return RecordingGateway(catalog)


@pytest.fixture
def failing_gateway(catalog: Catalog) -> FailingGateway:
    return FailingGateway(catalog)


@pytest.fixture
def engine(
    populated_dir: Path, metrics_registry: MetricsRegistry
) -> Generator[DatabaseEngine, None, None]:
    """Started engine over the populated CSV database."""
    db = DatabaseEngine(
        CsvPersistenceGateway(populated_dir, sync_writes=False),
        metrics=metrics_registry,
    )
    db.start()
    yield db
    if db.is_started:
        db.stop()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
