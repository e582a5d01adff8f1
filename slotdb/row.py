"""
Fixed-width (de)serialization of a single row.

A row is laid out as:
    id .. username .. email
where id is an unsigned int of ID_SIZE bytes, and username and email
are left-packed and zero-padded to USERNAME_SIZE and EMAIL_SIZE bytes.
"""
from dataclasses import dataclass
from typing import Union

from .constants import (
    BYTE_ORDER,
    ID_OFFSET,
    ID_SIZE,
    USERNAME_OFFSET,
    USERNAME_SIZE,
    EMAIL_OFFSET,
    EMAIL_SIZE,
    ROW_SIZE,
)


# anything that supports slice assignment of bytes, e.g. a page or a view into a page
WritableBuffer = Union[bytearray, memoryview]


@dataclass
class Row:
    """
    Logical record. Only lives between statement preparation and
    serialization; the encoded bytes in the page are the source of truth.
    """
    identifier: int
    username: bytes
    email: bytes

    def __str__(self):
        username = self.username.decode('utf-8', errors='replace')
        email = self.email.decode('utf-8', errors='replace')
        return f"{self.identifier} {username} {email}"


def serialize_row(row: Row, destination: WritableBuffer = None) -> WritableBuffer:
    """
    Encode `row` into `destination` starting at offset 0.
    If no destination is passed, a new buffer of ROW_SIZE bytes is used.

    NOTE: field lengths must already be validated; e.g. a username longer
    than USERNAME_SIZE would corrupt the email field.
    """
    if destination is None:
        destination = bytearray(ROW_SIZE)

    destination[ID_OFFSET: ID_OFFSET + ID_SIZE] = row.identifier.to_bytes(ID_SIZE, BYTE_ORDER)
    # padding also clears any bytes left behind by a previous occupant of the slot
    destination[USERNAME_OFFSET: USERNAME_OFFSET + USERNAME_SIZE] = row.username.ljust(USERNAME_SIZE, b'\x00')
    destination[EMAIL_OFFSET: EMAIL_OFFSET + EMAIL_SIZE] = row.email.ljust(EMAIL_SIZE, b'\x00')
    return destination


def deserialize_row(source: Union[bytes, WritableBuffer]) -> Row:
    """
    Decode the row stored at offset 0 of `source`.
    Trailing null bytes of string fields are treated as terminators;
    a value ending in a null byte would not round trip, so inserts reject them.
    """
    id_bstr = source[ID_OFFSET: ID_OFFSET + ID_SIZE]
    username_bstr = source[USERNAME_OFFSET: USERNAME_OFFSET + USERNAME_SIZE]
    email_bstr = source[EMAIL_OFFSET: EMAIL_OFFSET + EMAIL_SIZE]

    identifier = int.from_bytes(id_bstr, BYTE_ORDER)
    username = bytes(username_bstr).rstrip(b'\x00')
    email = bytes(email_bstr).rstrip(b'\x00')
    return Row(identifier, username, email)
