from typing import Iterator, Tuple

from .constants import ROW_SIZE, ROWS_PER_PAGE, TABLE_MAX_ROWS
from .cursor import Cursor
from .pager import Pager, CorruptDatabaseFile
from .row import Row, serialize_row, deserialize_row


def slot_address(row_num: int) -> Tuple[int, int]:
    """
    map row number to (page_num, byte_offset) of the row within the page.
    Rows are packed contiguously, in insertion order.
    """
    page_num = row_num // ROWS_PER_PAGE
    row_offset = row_num % ROWS_PER_PAGE
    byte_offset = row_offset * ROW_SIZE
    return page_num, byte_offset


class Table:
    """
    The single table of the database.
    The table owns the pager; rows are addressed purely by their row number,
    i.e. their insertion order.
    """
    def __init__(self, pager: Pager, row_count: int = 0):
        self.pager = pager
        self.row_count = row_count

    @classmethod
    def db_open(cls, filename: str) -> 'Table':
        """
        open table on argument file; row_count is recovered from the file header
        """
        pager = Pager.pager_open(filename)
        row_count = pager.get_row_count()
        max_rows_on_file = pager.num_pages * ROWS_PER_PAGE
        if row_count > min(max_rows_on_file, TABLE_MAX_ROWS):
            pager.discard()
            raise CorruptDatabaseFile(f"Db file [{filename}] claims {row_count} rows; "
                                      f"file holds at most {max_rows_on_file}")
        return cls(pager, row_count)

    def db_close(self):
        """
        persist row_count and flush pages
        """
        self.pager.set_row_count(self.row_count)
        self.pager.close()

    slot_address = staticmethod(slot_address)

    def is_full(self) -> bool:
        return self.row_count >= TABLE_MAX_ROWS

    def write_row(self, row_num: int, row: Row):
        """
        serialize `row` into the slot for `row_num`; allocates the page if needed
        """
        page_num, byte_offset = slot_address(row_num)
        page = self.pager.get_page_for_write(page_num)
        with memoryview(page) as view:
            serialize_row(row, view[byte_offset: byte_offset + ROW_SIZE])

    def read_row(self, row_num: int) -> Row:
        """
        deserialize the row in the slot for `row_num`
        """
        page_num, byte_offset = slot_address(row_num)
        page = self.pager.get_page_for_read(page_num)
        return deserialize_row(page[byte_offset: byte_offset + ROW_SIZE])

    def scan(self) -> Iterator[Row]:
        """
        lazily yield all rows, oldest first.
        Each call starts a new scan from row 0.
        """
        cursor = Cursor.table_start(self)
        while not cursor.end_of_table:
            yield cursor.value()
            cursor.advance()
