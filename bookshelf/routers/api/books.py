from typing import Annotated

from aiohttp import ClientSession
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from bookshelf.internal.covers import CoverResolver
from bookshelf.internal.env_settings import Settings
from bookshelf.internal.importer import ImportResult, import_goodreads_csv
from bookshelf.internal.library import add_library_record
from bookshelf.internal.models import LibraryRecord
from bookshelf.internal.rehost import ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.util.connection import get_connection
from bookshelf.util.dependencies import (
    get_cover_resolver,
    get_rehoster,
    get_repository,
)

router = APIRouter(prefix="/books", tags=["Library"])


class BackfillResponse(BaseModel):
    updated: int


@router.get("", response_model=list[LibraryRecord])
async def list_library(
    repository: Annotated[LibraryRepository, Depends(get_repository)],
):
    return await repository.list_records()


@router.post("", response_model=LibraryRecord, status_code=201)
async def add_book(
    record: LibraryRecord,
    client_session: Annotated[ClientSession, Depends(get_connection)],
    repository: Annotated[LibraryRepository, Depends(get_repository)],
    rehoster: Annotated[ImageRehoster | None, Depends(get_rehoster)],
):
    if not Settings().sources.rehost_on_add:
        rehoster = None
    return await add_library_record(client_session, repository, record, rehoster)


@router.post("/import", response_model=ImportResult)
async def import_books(
    request: Request,
    client_session: Annotated[ClientSession, Depends(get_connection)],
    repository: Annotated[LibraryRepository, Depends(get_repository)],
    resolver: Annotated[CoverResolver, Depends(get_cover_resolver)],
    rehoster: Annotated[ImageRehoster | None, Depends(get_rehoster)],
):
    """Import a Goodreads library export. The request body is the raw CSV."""
    text = (await request.body()).decode("utf-8-sig", errors="replace")
    return await import_goodreads_csv(
        text, repository, resolver, rehoster, client_session
    )


@router.post("/maintenance/backfill-ids", response_model=BackfillResponse)
async def backfill_ids(
    repository: Annotated[LibraryRepository, Depends(get_repository)],
):
    return BackfillResponse(updated=await repository.backfill_missing_ids())


@router.get("/{record_id}", response_model=LibraryRecord)
async def get_book(
    record_id: str,
    repository: Annotated[LibraryRepository, Depends(get_repository)],
):
    return await repository.get_record(record_id)


@router.put("/{record_id}", status_code=204)
async def update_book(
    record_id: str,
    record: LibraryRecord,
    repository: Annotated[LibraryRepository, Depends(get_repository)],
):
    await repository.update_record(record_id, record)
    return Response(status_code=204)


@router.delete("/{record_id}", status_code=204)
async def delete_book(
    record_id: str,
    repository: Annotated[LibraryRepository, Depends(get_repository)],
):
    await repository.delete_record(record_id)
    return Response(status_code=204)
