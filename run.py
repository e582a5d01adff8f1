"""
Main interface for user/developer of slotdb.

Utility to start repl and run commands.
"""

import sys

from slotdb import parse_args_and_start


if __name__ == '__main__':
    parse_args_and_start(sys.argv[1:])
