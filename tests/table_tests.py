"""
Tests slot addressing, capacity and scans of the table,
driven through the virtual machine.
"""
import pytest

from .context import (constants, Row, Table, Cursor, Pipe, VirtualMachine, VMConfig, ExecuteResult,
                      slot_address)
from .test_constants import TEST_DB_FILE


@pytest.fixture
def vm(tmp_path):
    machine = VirtualMachine(VMConfig(str(tmp_path / TEST_DB_FILE)), Pipe())
    yield machine
    machine.terminate()


def make_row(identifier: int) -> Row:
    return Row(identifier, f"user{identifier}".encode(), f"person{identifier}@example.com".encode())


def read_ids(pipe):
    return [row.identifier for row in pipe.drain()]


def test_slot_address():
    assert slot_address(0) == (0, 0)
    assert slot_address(1) == (0, constants.ROW_SIZE)
    assert slot_address(constants.ROWS_PER_PAGE - 1) == (0, (constants.ROWS_PER_PAGE - 1) * constants.ROW_SIZE)
    assert slot_address(constants.ROWS_PER_PAGE) == (1, 0)
    assert Table.slot_address(constants.ROWS_PER_PAGE + 2) == (1, 2 * constants.ROW_SIZE)


def test_slot_addresses_are_contiguous_and_distinct():
    seen = set()
    for row_num in range(constants.TABLE_MAX_ROWS):
        page_num, byte_offset = slot_address(row_num)
        assert byte_offset + constants.ROW_SIZE <= constants.PAGE_SIZE
        assert (page_num, byte_offset) not in seen
        seen.add((page_num, byte_offset))

        next_page_num, next_byte_offset = slot_address(row_num + 1)
        if next_page_num == page_num:
            assert next_byte_offset == byte_offset + constants.ROW_SIZE
        else:
            assert next_page_num == page_num + 1
            assert next_byte_offset == 0
    # last row lives on last page
    assert slot_address(constants.TABLE_MAX_ROWS - 1)[0] == constants.TABLE_MAX_PAGES - 1


def test_insert_then_select(vm):
    resp = vm.execute_insert(Row(1, b"alice", b"alice@example.com"))
    assert resp.success
    assert resp.status == ExecuteResult.Success
    assert vm.table.row_count == 1

    resp = vm.execute_select()
    assert resp.success
    assert resp.body == 1
    assert [str(row) for row in vm.pipe.drain()] == ["1 alice alice@example.com"]


def test_select_preserves_insertion_order(vm):
    for identifier in [7, 3, 9]:
        assert vm.execute_insert(make_row(identifier)).success

    vm.execute_select()
    assert read_ids(vm.pipe) == [7, 3, 9]


def test_select_is_repeatable(vm):
    for identifier in range(constants.ROWS_PER_PAGE + 3):
        vm.execute_insert(make_row(identifier))

    vm.execute_select()
    first = list(vm.pipe.drain())
    vm.execute_select()
    second = list(vm.pipe.drain())
    assert first == second
    assert [row.identifier for row in first] == list(range(constants.ROWS_PER_PAGE + 3))


def test_select_on_empty_table(vm):
    resp = vm.execute_select()
    assert resp.success
    assert not vm.pipe.has_msgs()


def test_table_full(vm):
    for identifier in range(constants.TABLE_MAX_ROWS):
        resp = vm.execute_insert(make_row(identifier))
        assert resp.success, f"insert {identifier} failed"
    assert vm.table.row_count == constants.TABLE_MAX_ROWS

    resp = vm.execute_insert(make_row(constants.TABLE_MAX_ROWS))
    assert not resp.success
    assert resp.status == ExecuteResult.TableFull
    assert vm.table.row_count == constants.TABLE_MAX_ROWS

    vm.execute_select()
    assert read_ids(vm.pipe) == list(range(constants.TABLE_MAX_ROWS))


def test_cursor(vm):
    for identifier in [5, 6]:
        vm.execute_insert(make_row(identifier))

    cursor = Cursor.table_start(vm.table)
    assert not cursor.end_of_table
    assert cursor.value().identifier == 5
    cursor.advance()
    assert cursor.slot_address() == (0, constants.ROW_SIZE)
    assert cursor.value().identifier == 6
    cursor.advance()
    assert cursor.end_of_table

    cursor = Cursor.table_end(vm.table)
    assert cursor.end_of_table
    assert cursor.row_num == 2


def test_scan_is_lazy_and_restartable(vm):
    for identifier in range(3):
        vm.execute_insert(make_row(identifier))

    scan = vm.table.scan()
    assert next(scan).identifier == 0
    # a new scan starts from the first row
    assert [row.identifier for row in vm.table.scan()] == [0, 1, 2]
    assert [row.identifier for row in scan] == [1, 2]


def test_rows_persisted(tmp_path):
    db_filepath = str(tmp_path / TEST_DB_FILE)
    table = Table.db_open(db_filepath)
    num_rows = constants.ROWS_PER_PAGE + 1
    for row_num in range(num_rows):
        table.write_row(row_num, make_row(row_num))
        table.row_count += 1
    table.db_close()

    table = Table.db_open(db_filepath)
    assert table.row_count == num_rows
    assert [row.identifier for row in table.scan()] == list(range(num_rows))
    table.db_close()
