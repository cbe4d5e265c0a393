"""
Database transaction contexts. The connection is supplied by the caller and is
never closed here.
"""
import sqlite3
from contextlib import contextmanager
from typing import Any
from typing import Iterator

from resourcescope.errors import AcquisitionError
from resourcescope.settings import ScopeSettings
from resourcescope.contexts.scoped_resource import ScopedResource
from resourcescope.contexts.suppression import SuppressErrors
from resourcescope.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)


class Transaction(ScopedResource):
    """
    Begins a transaction, passes the connection to the body and commits. If the
    body (or the commit) fails, the transaction is rolled back and the original
    exception is re-raised; a failure of the rollback itself is absorbed.

    `begin` returns whatever connection state `end` must restore once the
    transaction is over, so that nested or repeated scopes do not share it.
    """
    connection: Any

    def __init__(self, connection: Any, settings: ScopeSettings | None = None):
        super().__init__(settings)
        self.connection = connection

    def begin(self) -> Any:
        return None

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def end(self, state: Any) -> None:
        pass

    @contextmanager
    def scope(self) -> Iterator[Any]:
        with self.translation():
            state = self.begin()
            try:
                yield self.connection
                self.commit()
            except BaseException:
                logger.debug('Rolling back %s.', self)
                SuppressErrors(settings=self.settings).run(self.rollback)
                raise
            finally:
                self.end(state)


class DBAPITransaction(Transaction):
    """
    For any PEP 249 connection. Such connections open a transaction implicitly
    with the first statement; a `begin()` method is called if the driver has
    one. A connection whose `autocommit` attribute is `True` is switched out
    of autocommit mode for the duration of the scope. Other values (such as
    sqlite3's legacy transaction control, or a driver's `autocommit()` method)
    are left alone.
    """

    def begin(self) -> bool:
        autocommit = getattr(self.connection, 'autocommit', None) is True
        try:
            if autocommit:
                self.connection.autocommit = False
            begin = getattr(self.connection, 'begin', None)
            if callable(begin):
                begin()
        except Exception as error:
            if autocommit:
                self.end(autocommit)
            raise AcquisitionError(f'A transaction could not be started on {self.connection!r}.') from error
        return autocommit

    def end(self, autocommit: bool) -> None:
        if autocommit:
            self.best_effort(lambda: setattr(self.connection, 'autocommit', True), 'restore autocommit')


SQLITE_BEHAVIOURS = ('DEFERRED', 'IMMEDIATE', 'EXCLUSIVE')


class SQLiteTransaction(Transaction):
    """
    Starts the transaction explicitly with `BEGIN <behaviour>` and ends it with
    `COMMIT` or `ROLLBACK` statements, which also works on connections opened
    with `autocommit=True`. `IMMEDIATE` takes the write lock at once.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        behaviour: str = 'IMMEDIATE',
        settings: ScopeSettings | None = None,
    ):
        super().__init__(connection, settings)
        behaviour = behaviour.upper()
        if behaviour not in SQLITE_BEHAVIOURS:
            raise ValueError(f'Transaction behaviour must be one of {SQLITE_BEHAVIOURS}, got "{behaviour}".')
        self.behaviour = behaviour

    def begin(self) -> None:
        try:
            self.connection.execute(f'BEGIN {self.behaviour}')
        except sqlite3.Error as error:
            raise AcquisitionError(f'A {self.behaviour} transaction could not be started.') from error

    def commit(self) -> None:
        self.connection.execute('COMMIT')

    def rollback(self) -> None:
        self.connection.execute('ROLLBACK')

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.behaviour}')"
