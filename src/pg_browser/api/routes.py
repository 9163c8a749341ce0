"""HTTP routes for connecting, browsing tables and paging table data."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from pg_browser.api.dependencies import get_app_settings, get_registry
from pg_browser.api.responses import error_response
from pg_browser.config.settings import Settings
from pg_browser.db.introspection import SchemaIntrospector
from pg_browser.db.registry import ConnectionRegistry
from pg_browser.models.connection import ConnectionRequest, parse_connection_request
from pg_browser.models.errors import PgBrowserError
from pg_browser.services.table_reader import DEFAULT_LIMIT, DEFAULT_OFFSET, TableDataReader

logger = logging.getLogger(__name__)

router = APIRouter()

RegistryDep = Annotated[ConnectionRegistry, Depends(get_registry)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]


@router.get("/")
async def root() -> dict[str, str]:
    """Liveness probe."""
    return {"test": "ok"}


@router.post("/api/testConnection", response_model=None)
async def test_connection(
    body: ConnectionRequest, registry: RegistryDep, settings: SettingsDep
) -> dict[str, Any] | JSONResponse:
    """Create a pool, verify it and register it under a new identifier."""
    try:
        params = parse_connection_request(body, default_port=settings.pool.default_port)
        entry = await registry.connect(params)
    except PgBrowserError as e:
        logger.warning(f"Connect failed: {e.message}", extra={"error_code": e.code})
        return error_response(e, "Connection failed", settings.security, status_code=400)

    return {
        "success": True,
        "message": "Connection successful",
        "connectionId": entry.connection_id,
    }


@router.get("/api/tables/{connection_id}", response_model=None)
async def list_tables(
    connection_id: str, registry: RegistryDep, settings: SettingsDep
) -> dict[str, Any] | JSONResponse:
    """List base tables of the connected database."""
    try:
        entry = registry.get(connection_id)
        tables = await SchemaIntrospector(entry.pool).list_tables()
    except PgBrowserError as e:
        logger.warning(
            f"Listing tables failed: {e.message}",
            extra={"connection_id": connection_id, "error_code": e.code},
        )
        return error_response(e, "Failed to retrieve tables", settings.security)

    return {"success": True, "tables": [table.model_dump() for table in tables]}


@router.get("/api/tableData/{connection_id}/{schema}/{table}", response_model=None)
async def table_data(
    connection_id: str,
    schema: str,
    table: str,
    registry: RegistryDep,
    settings: SettingsDep,
    limit: Annotated[int, Query()] = DEFAULT_LIMIT,
    offset: Annotated[int, Query()] = DEFAULT_OFFSET,
) -> dict[str, Any] | JSONResponse:
    """Return column metadata, one page of rows and the total row count."""
    try:
        entry = registry.get(connection_id)
        page = await TableDataReader(entry.pool).read_page(
            schema, table, limit=limit, offset=offset
        )
    except PgBrowserError as e:
        logger.warning(
            f"Reading {schema}.{table} failed: {e.message}",
            extra={"connection_id": connection_id, "error_code": e.code},
        )
        return error_response(e, "Failed to retrieve table data", settings.security)

    return {
        "success": True,
        "columns": [column.model_dump() for column in page.columns],
        "data": page.rows,
        "total": page.total,
    }


@router.delete("/api/connections/{connection_id}", response_model=None)
async def close_connection(
    connection_id: str, registry: RegistryDep, settings: SettingsDep
) -> dict[str, Any] | JSONResponse:
    """Close a connection and release its pool."""
    try:
        await registry.close(connection_id)
    except PgBrowserError as e:
        logger.warning(
            f"Closing connection failed: {e.message}",
            extra={"connection_id": connection_id, "error_code": e.code},
        )
        return error_response(e, "Failed to close connection", settings.security)

    return {"success": True, "message": "Connection closed successfully"}
