import logging
import fcntl
import os.path

from .constants import (
    TABLE_MAX_PAGES,
    PAGE_SIZE,
    BYTE_ORDER,
    FILE_HEADER_OFFSET,
    FILE_HEADER_SIZE,
    FILE_PAGE_AREA_OFFSET,
    FILE_HEADER_VERSION_FIELD_SIZE,
    FILE_HEADER_VERSION_FIELD_OFFSET,
    FILE_HEADER_VERSION_VALUE,
    FILE_HEADER_ROW_COUNT_OFFSET,
    FILE_HEADER_ROW_COUNT_SIZE,
)


logger = logging.getLogger(__name__)


class CapacityExceeded(Exception):
    """Requested page is beyond TABLE_MAX_PAGES"""
    pass


class PageNotFound(Exception):
    """Requested page was never allocated"""
    pass


class CorruptDatabaseFile(Exception):
    """Database file does not have the expected layout"""
    pass


class DatabaseFileExclusiveLockNotAvailable(Exception):
    """Unable to obtain exclusive lock on database file"""
    pass


class Pager:
    """
    Manages pages in memory (cache) and on file.

    The pager provides page abstraction on top of the file's byte stream.
    From the pager's perspective, the file is organized like:
    file_header, page_0, page_1, ... page_N-1.

    All pages on file are loaded when the pager is opened; pages are only
    written back when the pager is closed. Pages are never freed, so the
    allocated pages always form a prefix of [0, TABLE_MAX_PAGES).
    """
    def __init__(self, filename: str):
        self.header = None
        self.pages = [None for _ in range(TABLE_MAX_PAGES)]
        self.filename = filename
        self.fileptr = None
        self.file_length = 0
        # number of pages in memory, i.e. highest allocated page num + 1
        self.num_pages = 0
        # number of pages on disk, when the file was opened
        self.num_pages_on_disk = 0
        self.init()

    @classmethod
    def pager_open(cls, filename):
        """
        Create pager on argument file
        """
        return cls(filename)

    def page_exists(self, page_num: int) -> bool:
        """
        :param page_num: has this page been allocated or loaded
        """
        return 0 <= page_num < TABLE_MAX_PAGES and self.pages[page_num] is not None

    def get_page_for_write(self, page_num: int) -> bytearray:
        """
        get `page` given `page_num`; a zeroed page is allocated
        if the page does not exist yet
        """
        if page_num < 0 or page_num >= TABLE_MAX_PAGES:
            raise CapacityExceeded(f"Tried to fetch page out of bounds (requested page = {page_num}, max pages = {TABLE_MAX_PAGES})")

        if self.pages[page_num] is None:
            logger.debug(f"allocating page {page_num}")
            self.pages[page_num] = bytearray(PAGE_SIZE)
            if page_num >= self.num_pages:
                self.num_pages = page_num + 1

        return self.pages[page_num]

    def get_page_for_read(self, page_num: int) -> bytearray:
        """
        get an existing `page` given `page_num`
        """
        if not self.page_exists(page_num):
            raise PageNotFound(f"Tried to read unallocated page (requested page = {page_num}, num pages = {self.num_pages})")
        return self.pages[page_num]

    def get_row_count(self) -> int:
        """
        row count persisted in the file header
        """
        value = self.header[FILE_HEADER_ROW_COUNT_OFFSET:
                            FILE_HEADER_ROW_COUNT_OFFSET + FILE_HEADER_ROW_COUNT_SIZE]
        return int.from_bytes(value, BYTE_ORDER)

    def set_row_count(self, row_count: int):
        """
        set row count in (in-memory) file header; persisted on close
        """
        value = row_count.to_bytes(FILE_HEADER_ROW_COUNT_SIZE, BYTE_ORDER)
        self.header[FILE_HEADER_ROW_COUNT_OFFSET:
                    FILE_HEADER_ROW_COUNT_OFFSET + FILE_HEADER_ROW_COUNT_SIZE] = value

    def close(self):
        """
        close the connection i.e. flush header and pages to file
        """
        if self.fileptr is None:
            # already closed
            return

        self.flush_header()

        # pages are 0-based
        for page_num in range(self.num_pages):
            if self.pages[page_num] is None:
                continue
            self.flush_page(page_num)

        self.fileptr.flush()
        fcntl.lockf(self.fileptr, fcntl.LOCK_UN)
        self.fileptr.close()
        self.fileptr = None
        logger.info(f"closed pager on [{self.filename}]; flushed {self.num_pages} pages")

    def discard(self):
        """
        close file without flushing anything; releases lock if held
        """
        self.fileptr.close()
        self.fileptr = None

    # section: internal API

    def init(self):
        """
        Initialize pager. This includes:
            - open database file
            - get exclusive lock on file
            - read or create file header
            - validate file size and set num_pages
            - warm up pager cache, by loading pages into memory
        """
        # r+b allows read and write, without truncation, but errors if
        # the file does not exist; w+b creates the file
        try:
            self.fileptr = open(self.filename, "r+b")
        except FileNotFoundError:
            self.fileptr = open(self.filename, "w+b")

        # get exclusive lock on file or fail
        # NOTE: this wont' work on windows
        ex_lock_or_fail = fcntl.LOCK_EX | fcntl.LOCK_NB
        try:
            fcntl.lockf(self.fileptr, ex_lock_or_fail)
        except BlockingIOError:
            self.discard()
            raise DatabaseFileExclusiveLockNotAvailable("Another process is operating on database")

        self.file_length = os.path.getsize(self.filename)
        if self.file_length == 0:
            self.create_file_header()
            return

        if self.file_length < FILE_HEADER_SIZE or (self.file_length - FILE_HEADER_SIZE) % PAGE_SIZE != 0:
            self.discard()
            raise CorruptDatabaseFile(f"Db file [{self.filename}] is not a valid size ({self.file_length} bytes)")

        self.read_file_header()

        self.num_pages_on_disk = (self.file_length - FILE_HEADER_SIZE) // PAGE_SIZE
        if self.num_pages_on_disk > TABLE_MAX_PAGES:
            self.discard()
            raise CorruptDatabaseFile(f"Db file [{self.filename}] has {self.num_pages_on_disk} pages; max is {TABLE_MAX_PAGES}")

        # warm up page cache, i.e. load pages into memory
        self.fileptr.seek(FILE_PAGE_AREA_OFFSET)
        for page_num in range(self.num_pages_on_disk):
            read_page = self.fileptr.read(PAGE_SIZE)
            assert len(read_page) == PAGE_SIZE, "corrupt file: read page returned byte array smaller than page"
            self.pages[page_num] = bytearray(read_page)
        self.num_pages = self.num_pages_on_disk
        logger.info(f"opened pager on [{self.filename}]; loaded {self.num_pages} pages")

    def create_file_header(self):
        """
        generate file header for a new file
        """
        header = bytearray(FILE_HEADER_SIZE)
        assert FILE_HEADER_VERSION_FIELD_SIZE >= len(FILE_HEADER_VERSION_VALUE)
        header[FILE_HEADER_VERSION_FIELD_OFFSET:
               FILE_HEADER_VERSION_FIELD_OFFSET + len(FILE_HEADER_VERSION_VALUE)] = FILE_HEADER_VERSION_VALUE
        self.header = header
        # NOTE: a new header is all zeroes, i.e. row count is already 0
        # this makes explicit what file init looks like
        self.set_row_count(0)

    def read_file_header(self):
        """
        read the file header, formatted like:

        version_string row_count padding
        version_string  -> "slotdb v<VersionNum>", null padded
        row_count -> int, number of rows in table
        """
        self.fileptr.seek(FILE_HEADER_OFFSET)
        self.header = bytearray(self.fileptr.read(FILE_HEADER_SIZE))
        version = self.header[FILE_HEADER_VERSION_FIELD_OFFSET:
                              FILE_HEADER_VERSION_FIELD_OFFSET + FILE_HEADER_VERSION_FIELD_SIZE]
        if bytes(version).rstrip(b'\x00') != FILE_HEADER_VERSION_VALUE:
            self.discard()
            raise CorruptDatabaseFile(f"Db file [{self.filename}] has unexpected version header {bytes(version)!r}")

    def flush_header(self):
        """
        Flush file header
        """
        self.fileptr.seek(FILE_HEADER_OFFSET)
        self.fileptr.write(self.header)

    def flush_page(self, page_num: int):
        """
        flush/write page to file
        page_num is the page to write
        """
        if self.pages[page_num] is None:
            raise PageNotFound(f"Tried to flush null page {page_num}")

        byte_offset = FILE_PAGE_AREA_OFFSET + page_num * PAGE_SIZE
        self.fileptr.seek(byte_offset)
        self.fileptr.write(self.pages[page_num])
