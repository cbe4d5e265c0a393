"""File, chunked stream and temporary file contexts."""
import os
import tempfile
from contextlib import contextmanager
from typing import IO
from typing import Callable
from typing import Iterator

from resourcescope.errors import AcquisitionError
from resourcescope.settings import ScopeSettings
from resourcescope.contexts.scoped_resource import ScopedResource
from resourcescope.standalone_utilities.chainable_destructable_resource import ChainableDestructableResource

try:
    import fcntl
except ImportError:
    # No advisory locking outside POSIX; locks are best-effort anyway.
    fcntl = None


def is_read_only(mode: str) -> bool:
    return not set(mode) & set('wax+')


class OpenFile(ChainableDestructableResource):
    """An open file object, closed on release after any lock held on it."""

    def __init__(self, file: IO):
        self.file = file

    def release(self) -> None:
        self.file.close()


class AdvisoryLock(ChainableDestructableResource):
    """
    A non-blocking `flock` on an open file. Construction raises when the lock
    is not immediately available.
    """

    def __init__(self, file: IO, lock_type: int):
        self.file = file
        fcntl.flock(file.fileno(), lock_type | fcntl.LOCK_NB)

    def release(self) -> None:
        fcntl.flock(self.file.fileno(), fcntl.LOCK_UN)


class FileHandle(ScopedResource):
    """
    Opens a file in the given mode and passes the file object to the body. The
    file is advisory-locked (shared for read-only modes, exclusive otherwise)
    when the lock is immediately available, and is unlocked and closed on exit.
    """
    path: str
    mode: str

    def __init__(
        self,
        path: str | os.PathLike,
        mode: str = 'r',
        encoding: str | None = None,
        newline: str | None = None,
        settings: ScopeSettings | None = None,
    ):
        super().__init__(settings)
        self.path = os.fspath(path)
        self.mode = mode
        self.encoding = encoding
        self.newline = newline

    def acquire(self) -> 'OpenFile':
        try:
            file = open(self.path, self.mode, encoding=self.encoding, newline=self.newline)
        except (OSError, ValueError) as error:
            raise AcquisitionError(f'[{self.path}] could not be opened, empty handle returned.') from error
        lease = OpenFile(file)
        if self.settings.advisory_locks and fcntl is not None:
            lock_type = fcntl.LOCK_SH if is_read_only(self.mode) else fcntl.LOCK_EX
            self.best_effort(lambda: lease.add_subresource(AdvisoryLock(file, lock_type)), 'lock')
        return lease

    def expose(self, lease: 'OpenFile') -> IO:
        return lease.file

    def dispose(self, lease: 'OpenFile') -> None:
        self.best_effort(lambda: lease.__exit__(None, None, None), 'unlock and close')

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.path}', '{self.mode}')"


class StreamHandle(ScopedResource):
    """
    Reads a file in binary chunks, calling the body once per chunk. The chunk
    size is the square of `chunk_multiplier` unless `chunk_size` is given.
    Opening, locking and closing are left to an inner `FileHandle`.
    """
    chunk_size: int

    def __init__(
        self,
        path: str | os.PathLike,
        chunk_multiplier: int | None = None,
        chunk_size: int | None = None,
        settings: ScopeSettings | None = None,
    ):
        super().__init__(settings)
        if chunk_size is None:
            if chunk_multiplier is None:
                chunk_multiplier = self.settings.chunk_multiplier
            if chunk_multiplier <= 0:
                raise ValueError(f'Chunk multiplier must be positive, got {chunk_multiplier}.')
            chunk_size = chunk_multiplier * chunk_multiplier
        elif chunk_size <= 0:
            raise ValueError(f'Chunk size must be positive, got {chunk_size}.')
        self.chunk_size = chunk_size
        self.file = FileHandle(path, 'rb', settings=self.settings)

    @contextmanager
    def scope(self) -> Iterator[Iterator[bytes]]:
        with self.file.scope() as file:
            yield self._chunks(file)

    def _chunks(self, file: IO[bytes]) -> Iterator[bytes]:
        while True:
            buffer = file.read(self.chunk_size)
            if not buffer:
                return
            yield buffer

    def invoke(self, body: Callable[[bytes], object], chunks: Iterator[bytes]) -> int:
        count = 0
        for buffer in chunks:
            body(buffer)
            count += 1
        return count

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.file.path}', {self.chunk_size})"


class TemporaryFileHandle(ScopedResource):
    """
    An anonymous temporary file. The platform removes the backing storage once
    the file is closed.
    """

    def __init__(self, mode: str = 'w+b', settings: ScopeSettings | None = None):
        super().__init__(settings)
        self.mode = mode

    def acquire(self) -> IO:
        try:
            return tempfile.TemporaryFile(mode=self.mode)
        except (OSError, ValueError) as error:
            raise AcquisitionError('A temporary file could not be created.') from error

    def dispose(self, file: IO) -> None:
        self.best_effort(file.close, 'close')

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.mode}')"
