"""
Spreadsheet-backed table used as the system of record.

Rows and columns are addressed by 0-based index into `get_values()`, where
row 0 is the header row.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence, TypeVar

from typing_extensions import override

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from gspread.utils import ValueInputOption, rowcol_to_a1

from bookshelf.internal.env_settings import SheetsSettings
from bookshelf.internal.exceptions import StoreUnavailable
from bookshelf.util.log import logger

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

T = TypeVar("T")


class BackingTable(ABC):
    @abstractmethod
    async def get_values(self) -> list[list[str]]:
        """All rows including the header, trailing empty cells may be missing"""

    @abstractmethod
    async def append_row(self, values: Sequence[str]) -> None: ...

    @abstractmethod
    async def update_row(self, row_index: int, values: Sequence[str]) -> None: ...

    @abstractmethod
    async def update_cells(self, updates: Sequence[tuple[int, int, str]]) -> None:
        """Batch write of (row_index, column_index, value) triples"""

    async def write_header(self, header: Sequence[str]) -> None:
        await self.update_row(0, header)

    @abstractmethod
    async def insert_column(self, column_index: int, header: str) -> None: ...

    @abstractmethod
    async def delete_row(self, row_index: int) -> None: ...


class GspreadTable(BackingTable):
    def __init__(self, settings: SheetsSettings):
        self.settings = settings
        self._worksheet: gspread.Worksheet | None = None

    def _open(self) -> gspread.Worksheet:
        if self._worksheet is not None:
            return self._worksheet
        if not self.settings.is_configured:
            raise StoreUnavailable("Google Sheet is not configured")

        credentials = Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": self.settings.client_email,
                "private_key": self.settings.private_key.replace("\\n", "\n"),
                "token_uri": self.settings.token_uri,
            },
            scopes=SCOPES,
        )
        client = gspread.authorize(credentials)
        self._worksheet = client.open_by_key(self.settings.spreadsheet_id).worksheet(
            self.settings.worksheet
        )
        logger.info(
            "Opened worksheet",
            spreadsheet_id=self.settings.spreadsheet_id,
            worksheet=self.settings.worksheet,
        )
        return self._worksheet

    async def _call(self, operation: Callable[[gspread.Worksheet], T]) -> T:
        def run() -> T:
            return operation(self._open())

        try:
            return await asyncio.to_thread(run)
        except StoreUnavailable:
            raise
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError) as e:
            logger.error("Google Sheets request failed", error=str(e))
            raise StoreUnavailable(f"Google Sheets request failed: {e}") from e

    @override
    async def get_values(self) -> list[list[str]]:
        return await self._call(lambda ws: ws.get_all_values())

    @override
    async def append_row(self, values: Sequence[str]) -> None:
        await self._call(
            lambda ws: ws.append_row(
                list(values),
                value_input_option=ValueInputOption.raw,
                table_range="A1",
            )
        )

    @override
    async def update_row(self, row_index: int, values: Sequence[str]) -> None:
        await self._call(
            lambda ws: ws.update(
                values=[list(values)],
                range_name=rowcol_to_a1(row_index + 1, 1),
                value_input_option=ValueInputOption.raw,
            )
        )

    @override
    async def update_cells(self, updates: Sequence[tuple[int, int, str]]) -> None:
        if not updates:
            return
        data: list[dict[str, Any]] = [
            {"range": rowcol_to_a1(row + 1, column + 1), "values": [[value]]}
            for row, column, value in updates
        ]
        await self._call(
            lambda ws: ws.batch_update(data, value_input_option=ValueInputOption.raw)
        )

    @override
    async def insert_column(self, column_index: int, header: str) -> None:
        await self._call(
            lambda ws: ws.insert_cols(
                [[header]],
                col=column_index + 1,
                value_input_option=ValueInputOption.raw,
            )
        )

    @override
    async def delete_row(self, row_index: int) -> None:
        await self._call(lambda ws: ws.delete_rows(row_index + 1))
