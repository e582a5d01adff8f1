"""
Contains symbol classes produced by the parser, and the transformer
that turns a lark parse tree into these symbols.
"""
from dataclasses import dataclass

from lark import Transformer

from ..dataexchange import StatementType
from ..row import Row


@dataclass
class Symbol:
    """
    Symbol is the root of parser hierarchy.
    Each statement symbol carries everything the virtual machine
    needs, so no text is re-parsed downstream.
    """
    statement_type = None


@dataclass
class InsertStmnt(Symbol):
    row: Row
    statement_type = StatementType.Insert


@dataclass
class SelectStmnt(Symbol):
    statement_type = StatementType.Select


class ToAst(Transformer):
    """
    Converts parse tree into statement symbols.
    String fields are encoded to utf-8 here, since field widths are in bytes.
    """

    def row_id(self, args) -> int:
        return int(args[0])

    def username(self, args) -> bytes:
        return str(args[0]).encode('utf-8')

    def email(self, args) -> bytes:
        return str(args[0]).encode('utf-8')

    def insert_stmnt(self, args) -> InsertStmnt:
        identifier, username, email = args
        return InsertStmnt(Row(identifier, username, email))

    def select_stmnt(self, args) -> SelectStmnt:
        # arguments are accepted, but unused
        return SelectStmnt()
