from contextlib import contextmanager
import os
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from .cursor import RowCursor
from .errors import CursorError
from .schemas import ClientOptions

DRIVER = "mysql+pymysql"


def build_url(options: ClientOptions, url: Optional[str] = None):
    """Connection URL for the resolved options.

    An explicit url (or DATABASE_URL in the environment) replaces the MySQL
    options entirely, e.g. sqlite:///./local.db.
    """
    url = url or os.environ.get("DATABASE_URL")
    if url:
        return url
    return URL.create(
        DRIVER,
        username=options.user,
        password=options.password,
        host=options.host,
        port=options.port,
        database=options.database,
        query={"charset": options.charset} if options.charset else {},
    )


def create_db_engine(url) -> Engine:
    url_text = str(url)
    connect_args = {"check_same_thread": False} if url_text.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


@contextmanager
def open_cursor(engine: Engine, query: str) -> Iterator[RowCursor]:
    """Execute `query` and yield a RowCursor over its result.

    Rows are streamed with a server-side cursor when the dialect has one.
    The connection is closed when the block exits.
    """
    with engine.connect() as conn:
        if engine.dialect.supports_server_side_cursors:
            conn = conn.execution_options(stream_results=True)
        try:
            result = conn.exec_driver_sql(query)
        except SQLAlchemyError as e:
            raise CursorError(f"Query failed: {e}") from e
        try:
            yield RowCursor.from_result(result)
        finally:
            result.close()
