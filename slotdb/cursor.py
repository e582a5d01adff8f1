from __future__ import annotations
from typing import Tuple, TYPE_CHECKING

from .row import Row

if TYPE_CHECKING:
    from .table import Table


class Cursor:
    """
    Represents a position in the table, i.e. a row number.
    A cursor is how the table is traversed; reads go through
    `value` and the cursor is moved with `advance`.
    """
    def __init__(self, table: Table, row_num: int, end_of_table: bool):
        self.table = table
        self.row_num = row_num
        self.end_of_table = end_of_table

    @classmethod
    def table_start(cls, table: Table) -> Cursor:
        """
        cursor at first row
        """
        return cls(table, 0, table.row_count == 0)

    @classmethod
    def table_end(cls, table: Table) -> Cursor:
        """
        cursor one past the last row, i.e. where the next row is inserted
        """
        return cls(table, table.row_count, True)

    def slot_address(self) -> Tuple[int, int]:
        return self.table.slot_address(self.row_num)

    def value(self) -> Row:
        """
        return row pointed to by cursor
        """
        return self.table.read_row(self.row_num)

    def advance(self):
        self.row_num += 1
        if self.row_num >= self.table.row_count:
            self.end_of_table = True
