from __future__ import annotations
import logging

from lark import Lark
from lark.exceptions import UnexpectedInput  # root of all lark exceptions

from ..constants import USERNAME_SIZE, EMAIL_SIZE, MAX_ID, SYNTAX_ERROR_MSG
from ..dataexchange import Response, PrepareResult
from .grammar import GRAMMAR
from .symbols import ToAst, InsertStmnt, Symbol


logger = logging.getLogger(__name__)

KEYWORDS = ("insert", "select")


class SqlFrontEnd:
    """
    Parser for slotdb statements, based on lark definition
    """
    def __init__(self, raise_exception=False):
        self.parser = None
        self.parsed = None  # parsed statement
        self.exc = None  # exception
        self.is_succ = False
        self.raise_exception = raise_exception
        self._init()

    def _init(self):
        self.parser = Lark(GRAMMAR, parser='lalr', start='stmnt')

    def error_summary(self):
        if self.exc is not None:
            return str(self.exc)

    def is_success(self):
        """
        whether parse operation is success
        """
        return self.is_succ

    def get_parsed(self) -> Symbol:
        return self.parsed

    def parse(self, text: str):
        """
        parse `text` into a statement symbol
        """
        try:
            tree = self.parser.parse(text)
            logger.debug(f"parse tree: {tree}")
            transformer = ToAst()
            self.parsed = transformer.transform(tree)
            self.is_succ = True
            self.exc = None
        except UnexpectedInput as e:
            self.exc = e
            self.parsed = None
            self.is_succ = False
            if self.raise_exception:
                raise


# one front end is shared across statements
_frontend = None


def get_frontend() -> SqlFrontEnd:
    global _frontend
    if _frontend is None:
        _frontend = SqlFrontEnd()
    return _frontend


def validate_insert(stmnt: InsertStmnt) -> Response:
    """
    check that row fields can be stored, i.e. the id fits ID_SIZE,
    fields contain no null bytes and fit their fixed width
    """
    row = stmnt.row
    if row.identifier > MAX_ID:
        return Response(False, error_message=SYNTAX_ERROR_MSG, status=PrepareResult.SyntaxError)
    # null bytes are field terminators in storage, so they cannot be stored
    if b"\x00" in row.username or b"\x00" in row.email:
        return Response(False, error_message=SYNTAX_ERROR_MSG, status=PrepareResult.SyntaxError)
    if len(row.username) > USERNAME_SIZE:
        return Response(False, error_message="Username is too long.", status=PrepareResult.ParamsTooLong)
    if len(row.email) > EMAIL_SIZE:
        return Response(False, error_message="Email is too long.", status=PrepareResult.ParamsTooLong)
    return Response(True, status=PrepareResult.Success, body=stmnt)


def prepare_statement(command: str) -> Response:
    """
    prepare statement, i.e. classify `command` by its first token,
    parse it and validate it.
    On success, the body is the statement symbol.

    :param command: a single input line; never a meta command
    """
    tokens = command.split()
    if not tokens or tokens[0] not in KEYWORDS:
        return Response(False, error_message=f"Unrecognized keyword at start of '{command}'.",
                        status=PrepareResult.UnrecognizedStatement)

    frontend = get_frontend()
    frontend.parse(command)
    if not frontend.is_success():
        logger.info(f"parse failed due to: [{frontend.error_summary()}]")
        return Response(False, error_message=SYNTAX_ERROR_MSG, status=PrepareResult.SyntaxError)

    stmnt = frontend.get_parsed()
    if isinstance(stmnt, InsertStmnt):
        return validate_insert(stmnt)
    return Response(True, status=PrepareResult.Success, body=stmnt)
