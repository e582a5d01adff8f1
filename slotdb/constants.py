# operational constants
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DB_FILE = 'db.file'

# env var used to override the log level
LOG_LEVEL_ENV_VAR = 'SLOTDB_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'WARNING'

# storage constants
# NOTE: storage and row-layout constants affect how the
# db file is written, and should not be changed once a db file is created.
PAGE_SIZE = 4096
WORD = 4
# all multi-byte integers are encoded with this byte order
BYTE_ORDER = 'little'

TABLE_MAX_PAGES = 100

# file header constants
# layout:
# version_string .. row_count .. padding
FILE_HEADER_OFFSET = 0
FILE_HEADER_SIZE = 100
FILE_PAGE_AREA_OFFSET = FILE_HEADER_SIZE
FILE_HEADER_VERSION_FIELD_OFFSET = 0
FILE_HEADER_VERSION_FIELD_SIZE = 16
# NOTE: The diff between size and len(FILE_HEADER_VERSION_VALUE) is padding
FILE_HEADER_VERSION_VALUE = b'slotdb v1'
FILE_HEADER_ROW_COUNT_OFFSET = FILE_HEADER_VERSION_FIELD_OFFSET + FILE_HEADER_VERSION_FIELD_SIZE
FILE_HEADER_ROW_COUNT_SIZE = WORD

# serialized data layout (row)
# id .. username .. email
ID_SIZE = WORD
USERNAME_SIZE = 32
EMAIL_SIZE = 255
ID_OFFSET = 0
USERNAME_OFFSET = ID_OFFSET + ID_SIZE
EMAIL_OFFSET = USERNAME_OFFSET + USERNAME_SIZE
ROW_SIZE = ID_SIZE + USERNAME_SIZE + EMAIL_SIZE

# largest id representable in ID_SIZE bytes
MAX_ID = 2 ** (ID_SIZE * 8) - 1

# rows never straddle a page; any remainder of the page is unused
ROWS_PER_PAGE = PAGE_SIZE // ROW_SIZE
TABLE_MAX_ROWS = ROWS_PER_PAGE * TABLE_MAX_PAGES

# user facing messages
EXECUTED_MSG = 'Executed!'
SYNTAX_ERROR_MSG = 'Syntax error. Could not parse statement.'
TABLE_FULL_MSG = 'Error: Table full.'

USAGE = '''
Supported meta-commands:
------------------------
print usage
> .help

print storage layout constants
> .constants

list tables (there is a single implicit table)
> .tables

flush to disk and quit REPL
> .exit
> .q

Supported commands:
-------------------
Insert a row; username is at most 32 bytes, email at most 255 bytes
> insert 1 alice alice@example.com

Select and output all rows, in insertion order (no filtering support)
> select
'''
