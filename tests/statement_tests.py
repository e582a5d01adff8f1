"""
Tests classification and validation of statements
"""
import pytest

from .context import constants, prepare_statement, SqlFrontEnd, PrepareResult, InsertStmnt, SelectStmnt, Row


def test_insert():
    resp = prepare_statement("insert 1 alice alice@example.com")
    assert resp.success
    assert resp.status == PrepareResult.Success
    assert resp.body == InsertStmnt(Row(1, b"alice", b"alice@example.com"))


def test_insert_extra_whitespace():
    resp = prepare_statement("  insert\t42   bob  bob@example.com  ")
    assert resp.success
    assert resp.body.row == Row(42, b"bob", b"bob@example.com")


def test_keywords_as_arguments():
    resp = prepare_statement("insert 3 select insert")
    assert resp.success
    assert resp.body.row == Row(3, b"select", b"insert")


def test_select():
    for text in ["select", "select  ", "select * from users"]:
        resp = prepare_statement(text)
        assert resp.success, text
        assert resp.body == SelectStmnt()


@pytest.mark.parametrize("text", [
    "insert",
    "insert 3 onlyonearg",
    "insert 1 a b c",
    "insert abc user user@example.com",
    "insert -1 user user@example.com",
    "insert 12abc user user@example.com",
    "insert 1.5 user user@example.com",
    f"insert {constants.MAX_ID + 1} user user@example.com",
])
def test_syntax_error(text):
    resp = prepare_statement(text)
    assert not resp.success
    assert resp.status == PrepareResult.SyntaxError
    assert resp.error_message == constants.SYNTAX_ERROR_MSG


def test_max_id():
    resp = prepare_statement(f"insert {constants.MAX_ID} user user@example.com")
    assert resp.success
    assert resp.body.row.identifier == constants.MAX_ID


def test_username_too_long():
    resp = prepare_statement(f"insert 1 {'a' * (constants.USERNAME_SIZE + 1)} a@b.c")
    assert resp.status == PrepareResult.ParamsTooLong
    assert resp.error_message == "Username is too long."


def test_email_too_long():
    resp = prepare_statement(f"insert 2 bob {'a' * 300}")
    assert resp.status == PrepareResult.ParamsTooLong
    assert resp.error_message == "Email is too long."


@pytest.mark.parametrize("text", ["insert 1 a b\x00", "insert 1 a\x00 b", "insert 1 \x00 b"])
def test_null_byte_in_field(text):
    """null bytes terminate stored fields, so they are rejected"""
    resp = prepare_statement(text)
    assert resp.status == PrepareResult.SyntaxError
    assert resp.error_message == constants.SYNTAX_ERROR_MSG


def test_fields_at_max_length():
    username = "a" * constants.USERNAME_SIZE
    email = "e" * constants.EMAIL_SIZE
    resp = prepare_statement(f"insert 1 {username} {email}")
    assert resp.success


def test_length_is_measured_in_bytes():
    # each é is 2 bytes in utf-8
    username = "é" * (constants.USERNAME_SIZE // 2 + 1)
    resp = prepare_statement(f"insert 1 {username} a@b.c")
    assert resp.status == PrepareResult.ParamsTooLong


@pytest.mark.parametrize("text", ["", "   ", "update 1 a b", "insertx 1 a b", "INSERT 1 a b", "selectall"])
def test_unrecognized(text):
    resp = prepare_statement(text)
    assert not resp.success
    assert resp.status == PrepareResult.UnrecognizedStatement
    assert resp.error_message == f"Unrecognized keyword at start of '{text}'."


def test_frontend_raise_exception():
    frontend = SqlFrontEnd(raise_exception=True)
    with pytest.raises(Exception):
        frontend.parse("insert 1 a")
    assert not frontend.is_success()
    assert frontend.error_summary()
