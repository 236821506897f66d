"""
Repository layer for the library table.

This is the only place that knows about row positions: everything outside of
it addresses records by their generated `id`.
"""

import re
from typing import Sequence

from bookshelf.internal.exceptions import BadRequest, NotFound
from bookshelf.internal.models import LibraryRecord, parse_for_sale
from bookshelf.internal.rehost import unique_stamp
from bookshelf.internal.sheets import BackingTable
from bookshelf.util.log import logger

# header names, in the order new tables are laid out
COLUMNS: tuple[str, ...] = (
    "id",
    "isbn",
    "title",
    "author",
    "type",
    "publisher",
    "year",
    "edition",
    "coverUrl",
    "notes",
    "price",
    "url",
    "language",
    "sellingPrice",
    "forSale",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_DIGIT = re.compile(r"\D")


def _slug(value: str, length: int) -> str:
    return _NON_ALNUM.sub("", value.lower())[:length]


def generate_id(
    isbn: str | None = None,
    title: str | None = None,
    author: str | None = None,
) -> str:
    """
    Record id from the ISBN digits, else from title and author slugs, followed
    by a base36 millisecond timestamp and a random suffix.
    """
    stamp = unique_stamp()

    digits = _NON_DIGIT.sub("", isbn or "")
    if digits:
        return f"{digits}-{stamp}"

    title_slug = _slug(title or "", 10)
    author_slug = _slug(author or "", 10)
    if title_slug and author_slug:
        return f"{title_slug}-{author_slug}-{stamp}"

    return f"book-{stamp}"


def _format_for_sale(value: bool | None) -> str:
    if value is None:
        return ""
    return "TRUE" if value else "FALSE"


def record_to_cells(record: LibraryRecord) -> dict[str, str]:
    data = record.model_dump(by_alias=True)
    cells = {column: str(data.get(column) or "") for column in COLUMNS}
    cells["forSale"] = _format_for_sale(record.for_sale)
    return cells


class LibraryRepository:
    """Record store adapter over a `BackingTable`."""

    table: BackingTable

    def __init__(self, table: BackingTable, persist_generated_ids: bool = True):
        self.table = table
        self.persist_generated_ids = persist_generated_ids

    @staticmethod
    def _row_to_record(header: Sequence[str], row: Sequence[str]) -> LibraryRecord:
        values = {
            name: row[i] if i < len(row) else ""
            for i, name in enumerate(header)
            if name
        }
        record = LibraryRecord.model_validate(
            {column: values.get(column, "") for column in COLUMNS if column != "forSale"}
        )
        record.for_sale = parse_for_sale(values.get("forSale")) is not False
        return record

    @staticmethod
    def _is_blank(record: LibraryRecord) -> bool:
        return not record.title.strip() and not record.author.strip()

    async def _read(self) -> tuple[list[str], list[tuple[int, LibraryRecord]]]:
        """Header plus (row_index, record) pairs for every non-blank row."""
        values = await self.table.get_values()
        if not values:
            return [], []

        header = [h.strip() for h in values[0]]
        rows: list[tuple[int, LibraryRecord]] = []
        for row_index, row in enumerate(values[1:], start=1):
            record = self._row_to_record(header, row)
            if self._is_blank(record):
                continue
            rows.append((row_index, record))
        return header, rows

    async def _find(self, record_id: str) -> tuple[list[str], int, LibraryRecord]:
        header, rows = await self._read()
        for row_index, record in rows:
            if record.id == record_id:
                return header, row_index, record
        raise NotFound(record_id)

    async def _ensure_schema(self) -> list[str]:
        """
        Make sure the table has a header containing every column, with `id`
        leading. Returns the header as it is after migration.
        """
        values = await self.table.get_values()
        header = [h.strip() for h in values[0]] if values else []

        if not any(header):
            header = list(COLUMNS)
            await self.table.write_header(header)
            logger.info("Wrote library table header", columns=len(header))
            return header

        if "id" not in header:
            await self.table.insert_column(0, "id")
            header.insert(0, "id")
            logger.info("Added id column to library table")

        missing = [column for column in COLUMNS if column not in header]
        if missing:
            header.extend(missing)
            await self.table.write_header(header)
            logger.info("Added missing columns to library table", columns=missing)

        return header

    def _require_identity(self, record: LibraryRecord) -> None:
        if self._is_blank(record):
            raise BadRequest("A book needs a title or an author")

    @staticmethod
    def _to_row(header: Sequence[str], record: LibraryRecord) -> list[str]:
        cells = record_to_cells(record)
        return [cells.get(name, "") for name in header]

    async def list_records(self) -> list[LibraryRecord]:
        header, rows = await self._read()

        missing: list[tuple[int, LibraryRecord]] = []
        for row_index, record in rows:
            if not record.id:
                record.id = generate_id(record.isbn, record.title, record.author)
                missing.append((row_index, record))

        if missing and self.persist_generated_ids:
            try:
                if "id" not in header:
                    header = await self._ensure_schema()
                id_column = header.index("id")
                await self.table.update_cells(
                    [(row_index, id_column, record.id) for row_index, record in missing]
                )
                logger.info("Persisted generated ids for legacy rows", count=len(missing))
            except Exception as e:
                logger.warning(
                    "Could not persist generated ids, they will change on next read",
                    count=len(missing),
                    error=str(e),
                )

        return [record for _, record in rows]

    async def get_record(self, record_id: str) -> LibraryRecord:
        _, _, record = await self._find(record_id)
        return record

    async def add_record(self, record: LibraryRecord) -> LibraryRecord:
        self._require_identity(record)
        header = await self._ensure_schema()

        persisted = record.model_copy()
        if persisted.id:
            _, rows = await self._read()
            if any(existing.id == persisted.id for _, existing in rows):
                raise BadRequest(f"A book with id {persisted.id} already exists")
        else:
            persisted.id = generate_id(persisted.isbn, persisted.title, persisted.author)

        await self.table.append_row(self._to_row(header, persisted))
        logger.info("Added library record", id=persisted.id, title=persisted.title)
        return persisted

    async def update_record(self, record_id: str, record: LibraryRecord) -> None:
        """Replace the whole row. Fields missing on `record` are cleared."""
        self._require_identity(record)
        await self._ensure_schema()
        header, row_index, _ = await self._find(record_id)
        replacement = record.model_copy(update={"id": record_id})
        await self.table.update_row(row_index, self._to_row(header, replacement))
        logger.info("Updated library record", id=record_id)

    async def delete_record(self, record_id: str) -> None:
        _, row_index, _ = await self._find(record_id)
        await self.table.delete_row(row_index)
        logger.info("Deleted library record", id=record_id)

    async def backfill_missing_ids(self) -> int:
        header = await self._ensure_schema()
        id_column = header.index("id")
        _, rows = await self._read()

        updates: list[tuple[int, int, str]] = []
        for row_index, record in rows:
            if record.id:
                continue
            updates.append(
                (row_index, id_column, generate_id(record.isbn, record.title, record.author))
            )

        await self.table.update_cells(updates)
        logger.info("Backfilled missing record ids", count=len(updates))
        return len(updates)
