"""REST API adapter for the query engine.

This module provides a FastAPI-based REST API for executing statements
against a DatabaseEngine.

Endpoints:
    POST /execute - Execute a statement
    GET /health - Health check
    GET /tables - Loaded tables and their schemas
    GET /stats - Engine statistics

A rejected statement is a normal result (HTTP 200, ``success: false``);
only an engine that is not started answers 503.

Usage:
    from query_engine.adapters.inbound.rest_api import create_app

    app = create_app(engine)
    # Run with uvicorn: uvicorn app:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from query_engine import __version__
from query_engine.application import DatabaseEngine, ExecutionResult


class SQLRequest(BaseModel):
    """Request model for statement execution."""

    sql: str = Field(..., description="Statement to execute")


class ErrorDetail(BaseModel):
    """Why a statement was rejected."""

    kind: str = Field(..., description="Stable error kind, e.g. 'table_not_found'")
    message: str = Field(..., description="Human-readable error message")


class SQLResponse(BaseModel):
    """Response model for statement execution."""

    success: bool = Field(..., description="Whether the statement was accepted")
    statement_type: str | None = Field(None, description="select, insert or delete")
    columns: list[str] = Field(default_factory=list, description="Result attribute names")
    rows: list[list[Any]] = Field(default_factory=list, description="Result rows")
    affected_rows: int = Field(0, description="Rows returned or changed")
    persisted: bool = Field(True, description="Whether the change reached disk")
    message: str = Field("", description="Status or error message")
    error: ErrorDetail | None = Field(None, description="Set when success is false")


class AttributeInfo(BaseModel):
    name: str
    type: str


class TableInfo(BaseModel):
    """A loaded table."""

    name: str = Field(..., description="Table name")
    attributes: list[AttributeInfo] = Field(..., description="Schema in ordinal order")
    rows: int = Field(..., description="Current row count")


class StatsResponse(BaseModel):
    """Response model for engine statistics."""

    started: bool = Field(..., description="Whether the engine is started")
    statements_executed: int = Field(0, description="Statements run since start")
    statements_failed: int = Field(0, description="Statements rejected since start")
    tables: dict[str, int] = Field(default_factory=dict, description="Row count per table")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


def _result_to_response(result: ExecutionResult) -> SQLResponse:
    """Convert ExecutionResult to SQLResponse."""
    return SQLResponse(
        success=result.success,
        statement_type=result.statement_type.value if result.statement_type else None,
        columns=result.columns,
        rows=[list(row) for row in result.rows],
        affected_rows=result.affected_rows,
        persisted=result.persisted,
        message=result.message,
        error=ErrorDetail(**result.error.to_dict()) if result.error is not None else None,
    )


def create_app(db: DatabaseEngine) -> FastAPI:
    """Create a FastAPI application for the query engine.

    Handlers are plain ``def`` so FastAPI runs them in its threadpool; the
    engine's per-table locks serialize concurrent statements.

    Args:
        db: The database engine to use.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="Query Engine API",
        description="REST API for executing SELECT / INSERT / DELETE statements",
        version=__version__,
    )

    def require_started() -> None:
        if not db.is_started:
            raise HTTPException(status_code=503, detail="Database not started")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy" if db.is_started else "unhealthy",
            version=__version__,
        )

    @app.get("/tables", response_model=list[TableInfo], tags=["Catalog"])
    def list_tables() -> list[TableInfo]:
        """List loaded tables with their schemas."""
        require_started()
        return [
            TableInfo(
                name=table.name,
                attributes=[
                    AttributeInfo(name=attribute.name, type=attribute.type.value)
                    for attribute in table.schema
                ],
                rows=len(table),
            )
            for table in db.catalog
        ]

    @app.get("/stats", response_model=StatsResponse, tags=["Stats"])
    def get_stats() -> StatsResponse:
        """Get engine statistics."""
        require_started()
        stats = db.get_stats()
        return StatsResponse(
            started=stats.get("started", False),
            statements_executed=stats.get("statements_executed", 0),
            statements_failed=stats.get("statements_failed", 0),
            tables=stats.get("tables", {}),
        )

    @app.post("/execute", response_model=SQLResponse, tags=["SQL"])
    def execute_sql(request: SQLRequest) -> SQLResponse:
        """Execute a statement.

        Args:
            request: The request containing the statement.

        Returns:
            The execution result.
        """
        require_started()
        return _result_to_response(db.execute(request.sql))

    return app


def run_server(
    db: DatabaseEngine,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Run the REST API server.

    Args:
        db: A started database engine.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(db)
    uvicorn.run(app, host=host, port=port, log_config=None)
