"""
Bulk import of a Goodreads library export (CSV).

Rows are matched against the existing library by ISBN and by a
case-insensitive title/author key, so re-importing the same export is a no-op.
"""

import csv
import io
import re

from aiohttp import ClientSession
from pydantic import BaseModel, Field

from bookshelf.internal.covers import CoverResolver
from bookshelf.internal.exceptions import BadRequest
from bookshelf.internal.models import LibraryRecord
from bookshelf.internal.rehost import ImageHint, ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.util.log import logger

# Excel-style ="0140449264" wrapping Goodreads uses to keep leading zeros
_EXCEL_WRAP = re.compile(r'^="?|"?$')


class ImportResult(BaseModel):
    total: int = 0
    processed: int = 0
    added: int = 0
    skipped: int = 0
    duplicates: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


def clean_isbn(value: str | None) -> str:
    if not value:
        return ""
    return _EXCEL_WRAP.sub("", value.strip()).strip()


def _field(row: dict[str, str | None], name: str) -> str:
    return (row.get(name) or "").strip()


def parse_goodreads_csv(text: str) -> list[LibraryRecord]:
    """Rows missing a title or an author are dropped."""
    reader = csv.DictReader(io.StringIO(text))
    records: list[LibraryRecord] = []
    for row in reader:
        title = _field(row, "Title")
        author = _field(row, "Author")
        if not title or not author:
            continue
        records.append(
            LibraryRecord(
                isbn=clean_isbn(row.get("ISBN13")) or clean_isbn(row.get("ISBN")),
                title=title,
                author=author,
                type="book",
                publisher=_field(row, "Publisher"),
                year=_field(row, "Year Published") or _field(row, "Original Publication Year"),
                notes=_field(row, "Private Notes"),
                for_sale=True,
            )
        )
    return records


def _title_author_key(record: LibraryRecord) -> str:
    return f"{record.title.lower()}|{record.author.lower()}"


async def import_goodreads_csv(
    text: str,
    repository: LibraryRepository,
    resolver: CoverResolver,
    rehoster: ImageRehoster | None,
    client_session: ClientSession,
) -> ImportResult:
    if not text or not text.strip():
        raise BadRequest("No file provided")

    books = parse_goodreads_csv(text)
    if not books:
        raise BadRequest("No valid books found in the CSV file")

    existing = await repository.list_records()
    known_isbns = {record.isbn for record in existing if record.isbn}
    known_keys = {_title_author_key(record) for record in existing}

    result = ImportResult(total=len(books))
    logger.info("Starting Goodreads import", total=result.total, existing=len(existing))

    for book in books:
        result.processed += 1
        label = f"{book.title} by {book.author}"

        key = _title_author_key(book)
        if (book.isbn and book.isbn in known_isbns) or key in known_keys:
            result.skipped += 1
            result.duplicates.append(label)
            continue

        try:
            cover_url = await _find_cover(client_session, resolver, rehoster, book)
            if cover_url:
                book.cover_url = cover_url
            await repository.add_record(book)
        except Exception as e:
            logger.error("Failed to import book", title=book.title, error=str(e))
            result.errors.append(f'Failed to add "{book.title}" by {book.author}: {e}')
            continue

        result.added += 1
        if book.isbn:
            known_isbns.add(book.isbn)
        known_keys.add(key)

    logger.info(
        "Goodreads import complete",
        added=result.added,
        skipped=result.skipped,
        errors=len(result.errors),
    )
    return result


async def _find_cover(
    client_session: ClientSession,
    resolver: CoverResolver,
    rehoster: ImageRehoster | None,
    book: LibraryRecord,
) -> str | None:
    try:
        cover_url = await resolver.resolve(
            client_session, isbn=book.isbn, title=book.title, author=book.author
        )
        if cover_url and rehoster:
            rehosted = await rehoster.rehost_best_image(
                client_session,
                [cover_url],
                ImageHint(isbn=book.isbn or None, title=book.title, author=book.author),
            )
            cover_url = rehosted or cover_url
    except Exception as e:
        logger.warning("Cover lookup failed during import", title=book.title, error=str(e))
        return None
    return cover_url
