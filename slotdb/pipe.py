from collections import deque
from typing import Iterator

from .row import Row


class Pipe:
    """
    Carries rows emitted by `select` from the virtual machine
    to whoever is reading the output, e.g. the repl.
    """

    def __init__(self):
        self.store = deque()

    def write(self, row: Row):
        self.store.append(row)

    def has_msgs(self) -> bool:
        return len(self.store) > 0

    def read(self) -> Row:
        """
        Read oldest row and remove it from the pipe
        """
        return self.store.popleft()

    def drain(self) -> Iterator[Row]:
        """
        Read rows until the pipe is empty
        """
        while self.has_msgs():
            yield self.read()
