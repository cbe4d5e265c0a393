"""Zip archive context."""
import errno
import io
import logging
import os
from zipfile import BadZipFile
from zipfile import ZIP_STORED
from zipfile import ZipFile

from resourcescope.errors import ArchiveError
from resourcescope.settings import ScopeSettings
from resourcescope.contexts.scoped_resource import ScopedResource

# libzip status codes
ER_SEEK = 4
ER_READ = 5
ER_NOENT = 9
ER_EXISTS = 10
ER_OPEN = 11
ER_MEMORY = 14
ER_INVAL = 18
ER_NOZIP = 19
ER_INCONS = 21

STATUS_MESSAGES = {
    ER_EXISTS: 'File already exists.',
    ER_INCONS: 'Zip archive inconsistent.',
    ER_INVAL: 'Invalid argument.',
    ER_MEMORY: 'Malloc failure.',
    ER_NOENT: 'No such file.',
    ER_NOZIP: 'Not a zip archive.',
    ER_OPEN: "Can't open file.",
    ER_READ: 'Read error.',
    ER_SEEK: 'Seek error.',
}
UNKNOWN_ERROR = 'unknown error'

CREATE_OR_OVERWRITE = 'w'


def status_message(status: int | None) -> str:
    return STATUS_MESSAGES.get(status, UNKNOWN_ERROR)


def classify_open_failure(error: BaseException) -> int | None:
    """Maps an exception raised while opening an archive to a libzip status."""
    if isinstance(error, io.UnsupportedOperation):
        return ER_SEEK
    if isinstance(error, FileExistsError):
        return ER_EXISTS
    if isinstance(error, FileNotFoundError):
        return ER_NOENT
    if isinstance(error, BadZipFile):
        if 'not a zip file' in str(error).lower():
            return ER_NOZIP
        return ER_INCONS
    if isinstance(error, EOFError):
        return ER_READ
    if isinstance(error, MemoryError):
        return ER_MEMORY
    if isinstance(error, ValueError):
        return ER_INVAL
    if isinstance(error, OSError):
        if error.errno == errno.ESPIPE:
            return ER_SEEK
        return ER_OPEN
    return None


class ZipContext(ScopedResource):
    """
    Opens a zip archive in the given `zipfile` mode (by default creating it,
    or overwriting an existing one) and passes the `ZipFile` to the body. An
    archive that cannot be opened raises `ArchiveError` with the status code
    and message describing why. The archive is closed on exit.
    """
    path: str
    mode: str

    def __init__(
        self,
        path: str | os.PathLike,
        mode: str = CREATE_OR_OVERWRITE,
        compression: int = ZIP_STORED,
        settings: ScopeSettings | None = None,
    ):
        super().__init__(settings)
        self.path = os.fspath(path)
        self.mode = mode
        self.compression = compression

    def acquire(self) -> ZipFile:
        try:
            return ZipFile(self.path, self.mode, compression=self.compression)
        except (OSError, BadZipFile, ValueError, EOFError, MemoryError, NotImplementedError, RuntimeError) as error:
            status = classify_open_failure(error)
            raise ArchiveError(status, status_message(status)) from error

    def dispose(self, archive: ZipFile) -> None:
        # Closing writes the central directory, so a failure here loses data.
        self.best_effort(archive.close, 'close the archive', level=logging.WARNING)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.path}', '{self.mode}')"
