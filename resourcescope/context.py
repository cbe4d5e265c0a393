"""
Functional gateway to the context objects. Each function returns a context
that can be `run` with a callback or used in a `with` statement.
"""
import os
import sqlite3
from typing import Any
from zipfile import ZIP_STORED

from resourcescope.settings import ScopeSettings
from resourcescope.contexts.archive import CREATE_OR_OVERWRITE
from resourcescope.contexts.archive import ZipContext
from resourcescope.contexts.files import FileHandle
from resourcescope.contexts.files import StreamHandle
from resourcescope.contexts.files import TemporaryFileHandle
from resourcescope.contexts.image import Image
from resourcescope.contexts.image import NewImage
from resourcescope.contexts.network import HTTPSession
from resourcescope.contexts.suppression import SuppressErrors
from resourcescope.contexts.suppression import SuppressOutput
from resourcescope.db.transactions import DBAPITransaction
from resourcescope.db.transactions import SQLiteTransaction


def file(
    path: str | os.PathLike,
    mode: str = 'r',
    encoding: str | None = None,
    newline: str | None = None,
    settings: ScopeSettings | None = None,
) -> FileHandle:
    """
    Open a file in the desired mode and pass the file object to the callback.
    The file is safely closed whatever happens in the callback.
    """
    return FileHandle(path, mode, encoding=encoding, newline=newline, settings=settings)


def tmpfile(mode: str = 'w+b', settings: ScopeSettings | None = None) -> TemporaryFileHandle:
    return TemporaryFileHandle(mode, settings=settings)


def stream(
    path: str | os.PathLike,
    chunk_multiplier: int | None = None,
    chunk_size: int | None = None,
    settings: ScopeSettings | None = None,
) -> StreamHandle:
    """
    Read a file in binary chunks, passing each chunk to the callback as it is
    read. The chunk size is the square of `chunk_multiplier` (1024 * 1024 bytes
    by default), or `chunk_size` bytes when that is given.
    """
    return StreamHandle(path, chunk_multiplier, chunk_size=chunk_size, settings=settings)


def image(path: str | os.PathLike, settings: ScopeSettings | None = None) -> Image:
    """Decode an image with Pillow and pass it to the callback."""
    return Image(path, settings=settings)


def new_image(
    width: int,
    height: int,
    mode: str = 'RGB',
    color: int | str | tuple[int, ...] = 0,
    settings: ScopeSettings | None = None,
) -> NewImage:
    return NewImage(width, height, mode, color, settings=settings)


def suppress_errors(settings: ScopeSettings | None = None) -> SuppressErrors:
    """Run the callback and ignore any exception it raises."""
    return SuppressErrors(settings=settings)


def no_output(settings: ScopeSettings | None = None) -> SuppressOutput:
    """Run the callback while discarding anything it prints to standard output."""
    return SuppressOutput(settings=settings)


def dbapi_transaction(connection: Any, settings: ScopeSettings | None = None) -> DBAPITransaction:
    """
    Execute and commit a transaction on a PEP 249 connection, rolling it back
    if anything fails.
    """
    return DBAPITransaction(connection, settings=settings)


def sqlite_transaction(
    connection: sqlite3.Connection,
    behaviour: str = 'IMMEDIATE',
    settings: ScopeSettings | None = None,
) -> SQLiteTransaction:
    return SQLiteTransaction(connection, behaviour, settings=settings)


def http_session(url: str = '', settings: ScopeSettings | None = None) -> HTTPSession:
    """
    Create a requests session bound to `url`; no further options are set.
    """
    return HTTPSession(url, settings=settings)


def archive(
    path: str | os.PathLike,
    mode: str = CREATE_OR_OVERWRITE,
    compression: int = ZIP_STORED,
    settings: ScopeSettings | None = None,
) -> ZipContext:
    """
    Open a zip archive in the desired mode (by default creating or
    overwriting it) and pass the `ZipFile` to the callback.
    """
    return ZipContext(path, mode, compression=compression, settings=settings)
