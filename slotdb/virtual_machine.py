from __future__ import annotations
import logging
from dataclasses import dataclass

from .constants import TABLE_FULL_MSG
from .cursor import Cursor
from .dataexchange import Response, ExecuteResult
from .lang_parser.symbols import Symbol, InsertStmnt, SelectStmnt
from .pipe import Pipe
from .row import Row
from .table import Table


logger = logging.getLogger(__name__)


# section: exceptions


class ExecutionException(Exception):
    """
    Some error while VM was running
    """
    pass


@dataclass
class VMConfig:
    """
    Runtime configuration of the virtual machine
    """
    db_filepath: str


class VirtualMachine:
    """
    Executes prepared statements against the table.
    Rows produced by `select` are written to the output pipe.
    """
    def __init__(self, config: VMConfig, pipe: Pipe):
        self.config = config
        self.pipe = pipe
        self.table = Table.db_open(config.db_filepath)

    def terminate(self):
        """
        flush table to disk; must be called before exiting
        """
        if self.table is not None:
            self.table.db_close()
            self.table = None

    def run(self, stmnt: Symbol) -> Response:
        """
        execute statement
        """
        if isinstance(stmnt, InsertStmnt):
            return self.execute_insert(stmnt.row)
        elif isinstance(stmnt, SelectStmnt):
            return self.execute_select()
        raise ExecutionException(f"Unable to execute statement of type {type(stmnt).__name__}")

    def execute_insert(self, row: Row) -> Response:
        """
        append row at the end of the table.
        Capacity is checked before anything is written.
        """
        table = self.table
        if table.is_full():
            return Response(False, error_message=TABLE_FULL_MSG, status=ExecuteResult.TableFull)

        cursor = Cursor.table_end(table)
        table.write_row(cursor.row_num, row)
        # row is fully written before it becomes visible
        table.row_count += 1
        logger.debug(f"inserted row {row.identifier} at slot {cursor.slot_address()}")
        return Response(True, status=ExecuteResult.Success)

    def execute_select(self) -> Response:
        """
        full table scan; writes each row, oldest first, to the pipe
        """
        num_rows = 0
        for row in self.table.scan():
            self.pipe.write(row)
            num_rows += 1
        return Response(True, status=ExecuteResult.Success, body=num_rows)
