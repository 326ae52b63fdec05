"""
FastAPI REST API for docsql.

Runs SQL-like statements against the configured document store and exposes
paging, inline edits, inserts, history and CSV export of the current result.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from docsql import QueryOrchestrator
from docsql.adapters import create_adapter
from docsql.config import StoreConfig
from docsql.core.exceptions import ConfigError, EditError, OptimisticWriteError
from docsql.core.models import QueryHistoryItem, QueryResult
from docsql.editing.values import EditType, InsertField, build_insert_payload, parse_edit_value
from docsql.export import export_filename

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("docsql.api")

app = FastAPI(
    title="docsql API",
    description="Run SQL-like statements against a schemaless document store",
    version="1.0.0",
)


class StatementRequest(BaseModel):
    """Request model for running a statement."""
    statement: str = Field(..., description="SELECT, INSERT, UPDATE or DELETE statement")


class ConnectRequest(BaseModel):
    """Request model for (re)connecting the store."""
    config: str = Field(..., description="JSON connection object with mongo_uri and database_name")


class CellEditRequest(BaseModel):
    """Request model for an inline cell edit."""
    document_id: str
    field: str
    value: str = ""
    type: EditType = EditType.STRING


class InsertRowRequest(BaseModel):
    """Request model for an inline row insert."""
    fields: List[InsertField]


class ResultResponse(BaseModel):
    """Response model wrapping the current result and page."""
    result: Optional[QueryResult] = None
    page: int


_orchestrator: Optional[QueryOrchestrator] = None


def get_orchestrator() -> QueryOrchestrator:
    """Create or get the shared orchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = QueryOrchestrator.from_config(StoreConfig.from_env())
    return _orchestrator


def _response(orchestrator: QueryOrchestrator) -> ResultResponse:
    return ResultResponse(result=orchestrator.result, page=orchestrator.page)


@app.post("/connect", response_model=ResultResponse)
async def connect(request: ConnectRequest):
    """Replace the store connection with the one described by `config`."""
    try:
        config = StoreConfig.from_json(request.config)
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Connecting to database '%s'", config.database_name)
    adapter = create_adapter(config)
    try:
        await adapter.ping()
    except Exception as e:
        logger.warning("Database '%s' unreachable: %s", config.database_name, e)
        await adapter.close()
        raise HTTPException(status_code=502, detail=f"Could not connect to database: {e}")

    orchestrator = get_orchestrator()
    await orchestrator.session.connect(adapter)
    orchestrator.reset()
    return _response(orchestrator)


@app.post("/query", response_model=ResultResponse)
async def run_query(request: StatementRequest):
    """Run a statement; errors come back as error-typed results."""
    orchestrator = get_orchestrator()
    await orchestrator.run(request.statement)
    return _response(orchestrator)


@app.post("/query/next", response_model=ResultResponse)
async def next_page():
    orchestrator = get_orchestrator()
    await orchestrator.next_page()
    return _response(orchestrator)


@app.post("/query/previous", response_model=ResultResponse)
async def previous_page():
    orchestrator = get_orchestrator()
    await orchestrator.previous_page()
    return _response(orchestrator)


@app.post("/result/cells", response_model=ResultResponse)
async def edit_cell(request: CellEditRequest):
    """
    Edit one cell of the current result.

    The change is applied locally before the store write; a failed write
    answers 502 and leaves the local change in place.
    """
    orchestrator = get_orchestrator()
    try:
        value = parse_edit_value(request.value, request.type)
        await orchestrator.edit_cell(request.document_id, request.field, value)
    except EditError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OptimisticWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _response(orchestrator)


@app.post("/result/rows", response_model=ResultResponse)
async def insert_row(request: InsertRowRequest):
    """Insert a document and prepend it to the current result."""
    orchestrator = get_orchestrator()
    try:
        payload = build_insert_payload(request.fields)
        await orchestrator.insert_row(payload)
    except EditError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OptimisticWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _response(orchestrator)


@app.get("/history", response_model=List[QueryHistoryItem])
async def history():
    """Query history, most recent first."""
    return list(reversed(get_orchestrator().history.items))


@app.get("/result/export.csv", response_class=PlainTextResponse)
async def export_csv():
    orchestrator = get_orchestrator()
    content = orchestrator.export_csv()
    if not content:
        raise HTTPException(status_code=404, detail="No rows to export")
    headers: Dict[str, Any] = {
        "Content-Disposition": f'attachment; filename="{export_filename()}"'
    }
    return PlainTextResponse(content, media_type="text/csv; charset=utf-8", headers=headers)


@app.delete("/session", response_model=ResultResponse)
async def logout():
    """Clear the current result, paging state and history."""
    orchestrator = get_orchestrator()
    orchestrator.reset()
    return _response(orchestrator)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_PORT", "8000"))
    host = os.getenv("API_HOST", "0.0.0.0")

    uvicorn.run(app, host=host, port=port)
