"""
handlers/routes.py
------------------
HTTP surface. Paths are table-scoped:

    GET    /                 -> list tables
    GET    /{table}          -> list rows (limit / offset)
    PUT    /{table}          -> create row
    GET    /{table}/{id}     -> read row
    POST   /{table}/{id}     -> update row
    DELETE /{table}/{id}     -> delete row

Table names match `[A-Za-z0-9_]+` and are looked up case-sensitively, so a
mixed-case table (created quoted) is only reachable with the same casing
in the URL.

Database work is blocking (psycopg2), so it runs in the threadpool.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Request, Response
from starlette.concurrency import run_in_threadpool

from services.table_service import TableService

TABLE_PATTERN = r"^[A-Za-z0-9_]+$"
ROW_ID_PATTERN = r"^[0-9]+$"

router = APIRouter()


def get_table_service(request: Request) -> TableService:
    return request.app.state.table_service


@router.get("/")
async def list_tables(service: TableService = Depends(get_table_service)):
    return service.list_tables()


@router.get("/{table}")
async def list_rows(
    table: str = Path(pattern=TABLE_PATTERN),
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    service: TableService = Depends(get_table_service),
):
    return await run_in_threadpool(service.list_rows, table, limit, offset)


@router.put("/{table}")
async def create_row(
    request: Request,
    table: str = Path(pattern=TABLE_PATTERN),
    service: TableService = Depends(get_table_service),
):
    body = await request.body()
    await run_in_threadpool(service.create_row, table, body)
    return Response(status_code=200)


@router.get("/{table}/{row_id}")
async def get_row(
    table: str = Path(pattern=TABLE_PATTERN),
    row_id: str = Path(pattern=ROW_ID_PATTERN),
    service: TableService = Depends(get_table_service),
):
    return await run_in_threadpool(service.get_row, table, row_id)


@router.post("/{table}/{row_id}")
async def update_row(
    request: Request,
    table: str = Path(pattern=TABLE_PATTERN),
    row_id: str = Path(pattern=ROW_ID_PATTERN),
    service: TableService = Depends(get_table_service),
):
    body = await request.body()
    await run_in_threadpool(service.update_row, table, row_id, body)
    return Response(status_code=200)


@router.delete("/{table}/{row_id}")
async def delete_row(
    table: str = Path(pattern=TABLE_PATTERN),
    row_id: str = Path(pattern=ROW_ID_PATTERN),
    service: TableService = Depends(get_table_service),
):
    return await run_in_threadpool(service.delete_row, table, row_id)
