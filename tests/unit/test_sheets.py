"""Unit tests for the gspread-backed table."""

from unittest.mock import MagicMock

import gspread
import pytest
from gspread.utils import ValueInputOption

from bookshelf.internal.env_settings import SheetsSettings
from bookshelf.internal.exceptions import StoreUnavailable
from bookshelf.internal.sheets import GspreadTable


@pytest.fixture
def worksheet():
    return MagicMock()


@pytest.fixture
def gspread_table(worksheet) -> GspreadTable:
    table = GspreadTable(
        SheetsSettings(spreadsheet_id="sheet", client_email="svc@x.iam", private_key="key")
    )
    table._worksheet = worksheet
    return table


class TestGspreadTable:
    async def test_unconfigured(self):
        with pytest.raises(StoreUnavailable, match="not configured"):
            await GspreadTable(SheetsSettings()).get_values()

    async def test_get_values(self, gspread_table: GspreadTable, worksheet):
        worksheet.get_all_values.return_value = [["id", "title"], ["1", "Dune"]]

        assert await gspread_table.get_values() == [["id", "title"], ["1", "Dune"]]

    async def test_update_row_uses_one_based_range(self, gspread_table: GspreadTable, worksheet):
        await gspread_table.update_row(2, ["b", "Beowulf"])

        worksheet.update.assert_called_once_with(
            values=[["b", "Beowulf"]],
            range_name="A3",
            value_input_option=ValueInputOption.raw,
        )

    async def test_update_cells_is_one_batch(self, gspread_table: GspreadTable, worksheet):
        await gspread_table.update_cells([(1, 0, "id-1"), (4, 0, "id-4")])

        worksheet.batch_update.assert_called_once_with(
            [
                {"range": "A2", "values": [["id-1"]]},
                {"range": "A5", "values": [["id-4"]]},
            ],
            value_input_option=ValueInputOption.raw,
        )

    async def test_update_cells_empty_is_noop(self, gspread_table: GspreadTable, worksheet):
        await gspread_table.update_cells([])

        worksheet.batch_update.assert_not_called()

    async def test_insert_column_and_delete_row(self, gspread_table: GspreadTable, worksheet):
        await gspread_table.insert_column(0, "id")
        await gspread_table.delete_row(3)

        worksheet.insert_cols.assert_called_once_with(
            [["id"]], col=1, value_input_option=ValueInputOption.raw
        )
        worksheet.delete_rows.assert_called_once_with(4)

    async def test_gspread_errors_become_store_unavailable(
        self, gspread_table: GspreadTable, worksheet
    ):
        worksheet.get_all_values.side_effect = gspread.exceptions.GSpreadException("quota")

        with pytest.raises(StoreUnavailable, match="quota"):
            await gspread_table.get_values()
