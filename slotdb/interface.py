from __future__ import annotations
"""
This module contains the highest level user-interaction and resource allocation
i.e. management of entities, like the statement front end, virtual machine,
table, etc. that implement the DBMS functionality that is slotdb.
"""
import os
import os.path
import sys
import logging

from typing import List

from .constants import (
    DB_FILE,
    USAGE,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXECUTED_MSG,
    LOG_LEVEL_ENV_VAR,
    DEFAULT_LOG_LEVEL,
    ROW_SIZE,
    PAGE_SIZE,
    ROWS_PER_PAGE,
    TABLE_MAX_PAGES,
    TABLE_MAX_ROWS,
    USERNAME_SIZE,
    EMAIL_SIZE,
)
from .dataexchange import Response, MetaCommandResult, StatementType
from .lang_parser.sqlhandler import prepare_statement
from .lang_parser.symbols import Symbol
from .pager import CorruptDatabaseFile, DatabaseFileExclusiveLockNotAvailable
from .pipe import Pipe
from .virtual_machine import VirtualMachine, VMConfig


logger = logging.getLogger(__name__)


# section: core execution/user-interface logic

def config_logging():
    # config logger
    # NOTE: basicConfig logs to stderr; stdout only carries statement output
    FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"
    level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(format=FORMAT, level=level)


def print_constants():
    print(f"ROW_SIZE: {ROW_SIZE}")
    print(f"USERNAME_SIZE: {USERNAME_SIZE}")
    print(f"EMAIL_SIZE: {EMAIL_SIZE}")
    print(f"PAGE_SIZE: {PAGE_SIZE}")
    print(f"ROWS_PER_PAGE: {ROWS_PER_PAGE}")
    print(f"TABLE_MAX_PAGES: {TABLE_MAX_PAGES}")
    print(f"TABLE_MAX_ROWS: {TABLE_MAX_ROWS}")


class SlotDB:
    """
    This provides programmatic interface for interacting with databases managed by slotdb.

    An example flow is like:
    ```
    # create handler instance
    db = SlotDB(db_filepath)

    # submit statement
    resp = db.handle_input("insert 1 alice alice@example.com")
    assert resp.success

    resp = db.handle_input("select")
    assert resp.success

    # rows produced by select are read from the pipe
    pipe = db.get_pipe()
    while pipe.has_msgs():
        print(pipe.read())

    # close handle - flushes in-memory state to file
    db.close()
    ```
    """

    def __init__(self, db_filepath: str = DB_FILE, nuke_db_file: bool = False):
        """
        :param db_filepath: path to DB file; i.e. file that stores state of this database
        :param nuke_db_file: whether to nuke the file before self is initialized
        """
        self.db_filepath = db_filepath
        if nuke_db_file and os.path.exists(self.db_filepath):
            os.remove(self.db_filepath)
        self.pipe = None
        self.virtual_machine = None
        self.configure()
        self.reset()

    def reset(self):
        """
        Reset state. Recreates pipe and virtual_machine.
        """
        config = VMConfig(self.db_filepath)
        self.pipe = Pipe()
        if self.virtual_machine:
            self.virtual_machine.terminate()
            self.virtual_machine = None
        self.virtual_machine = VirtualMachine(config, self.pipe)

    def configure(self):
        """
        Handle any configuration tasks
        """
        config_logging()

    def nuke_dbfile(self):
        """
        remove db file.
        This effectively restarts the instance into a clean state.
        """
        # release the file before removing it
        if self.virtual_machine:
            self.virtual_machine.terminate()
            self.virtual_machine = None
        if os.path.exists(self.db_filepath):
            os.remove(self.db_filepath)
        self.reset()

    def get_pipe(self) -> Pipe:
        """
        NOTE: pipes are recycled if SlotDB.reset is invoked
        """
        return self.pipe

    def close(self):
        """
        NOTE: must be called before exiting, to persist data to disk
        """
        self.virtual_machine.terminate()

    def handle_input(self, input_buffer: str) -> Response:
        """
        handle input- parse and execute

        On success, body holds the message to show the user, if any.
        On failure, error_message holds the message to show the user.
        """
        return self.input_handler(input_buffer)

    @staticmethod
    def is_meta_command(command: str) -> bool:
        return bool(command) and command[0] == '.'

    def do_meta_command(self, command: str) -> Response:
        """
        handle execution of meta command
        """
        command = command.rstrip()
        if command in (".exit", ".q"):
            self.close()
            sys.exit(EXIT_SUCCESS)
        elif command == ".tables":
            # there is a single implicit table; nothing to list
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".constants":
            print("Constants:")
            print_constants()
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".help":
            print(USAGE)
            return Response(True, status=MetaCommandResult.Success)
        return Response(False, error_message=f"Unrecognized command '{command}'",
                        status=MetaCommandResult.UnrecognizedCommand)

    def execute_statement(self, stmnt: Symbol) -> Response:
        """
        execute statement;
        returns return value of child-invocation
        """
        return self.virtual_machine.run(stmnt)

    def input_handler(self, input_buffer: str) -> Response:
        """
        receive input, parse input, and execute vm.
        """
        if self.is_meta_command(input_buffer):
            return self.do_meta_command(input_buffer)

        p_resp = prepare_statement(input_buffer)
        if not p_resp.success:
            return p_resp

        stmnt = p_resp.body
        e_resp = self.execute_statement(stmnt)
        if not e_resp.success:
            logger.info(f"Execution of command '{input_buffer}' failed")
            return e_resp

        if stmnt.statement_type == StatementType.Insert:
            return Response(True, status=e_resp.status, body=EXECUTED_MSG)
        return Response(True, status=e_resp.status)


def print_response(db: SlotDB, resp: Response):
    """
    print rows produced by the last statement, followed by the
    acknowledgement or error message
    """
    for row in db.get_pipe().drain():
        print(row)
    if not resp.success:
        print(resp.error_message)
    elif resp.body is not None:
        print(resp.body)


def open_db(db_filepath: str) -> SlotDB:
    """
    open database or exit; there is no way to continue
    without a consistent store
    """
    try:
        return SlotDB(db_filepath)
    except (CorruptDatabaseFile, DatabaseFileExclusiveLockNotAvailable, OSError) as e:
        logging.error(f"Unable to open database [{db_filepath}]: {e}")
        sys.exit(EXIT_FAILURE)


def repl(db_filepath: str = DB_FILE):
    """
    REPL (read-eval-print loop) for slotdb
    """
    db = open_db(db_filepath)

    while True:
        try:
            input_buffer = input("db > ")
        except EOFError:
            # end of input is treated like .exit
            input_buffer = ".exit"
        resp = db.handle_input(input_buffer)
        print_response(db, resp)


def run_file(input_filepath: str, db_filepath: str = DB_FILE):
    """
    Execute statements in file, one per line.
    """
    if not os.path.exists(input_filepath):
        print(f"Argument file [{input_filepath}] not found")
        return

    db = open_db(db_filepath)

    with open(input_filepath) as fp:
        for line in fp:
            input_buffer = line.rstrip("\n")
            resp = db.handle_input(input_buffer)
            print_response(db, resp)

    db.close()


def parse_args_and_start(args: List):
    """
    parse args and starts
    """
    args_description = """Usage:
python run.py repl [<db-filepath>]
    // start repl
python run.py file <filepath> [<db-filepath>]
    // execute each line of file at <filepath>
    """
    if len(args) < 1:
        print("Error: run-mode not specified")
        print(args_description)
        return

    runmode = args[0].lower()
    if runmode == "repl":
        db_filepath = args[1] if len(args) > 1 else DB_FILE
        repl(db_filepath)
    elif runmode == "file":
        if len(args) < 2:
            print("Error: Expected input filepath")
            print(args_description)
            return
        input_filepath = args[1]
        db_filepath = args[2] if len(args) > 2 else DB_FILE
        run_file(input_filepath, db_filepath)
    else:
        print(f"Error: Invalid run mode [{runmode}]")
        print(args_description)
        return


def main():
    parse_args_and_start(sys.argv[1:])
