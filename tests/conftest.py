import io

import pytest

from querydump import RowCursor, Sink


PEOPLE_COLUMNS = ["id", "name"]
PEOPLE_ROWS = [(1, "Alice"), (2, "O'Brien"), (3, None)]


class FailingStream(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        raise OSError("disk full")


@pytest.fixture
def out():
    return io.BytesIO()


@pytest.fixture
def sink(out):
    return Sink(out)


@pytest.fixture
def people():
    return RowCursor(PEOPLE_COLUMNS, list(PEOPLE_ROWS))
