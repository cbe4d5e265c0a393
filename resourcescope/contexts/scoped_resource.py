"""
Contexts create a block level scope on a resource and manage the creation and
cleanup of that resource irrespective of any exceptions that arise while it is
in use.

A context can be driven in two equivalent ways:

```py
context.file('notes.txt').run(lambda file: file.read())

with context.file('notes.txt') as file:
    file.read()
```

While inside a scope, warnings are raised as exceptions (see
`WarningTranslation`), so any warning filters configured by the calling code
are overridden until the scope exits.
"""
import logging
from contextlib import ExitStack
from contextlib import contextmanager
from typing import Any
from typing import Callable
from typing import Iterator
from typing import TypeVar

from resourcescope.settings import ScopeSettings
from resourcescope.settings import default_settings
from resourcescope.standalone_utilities.log_formats import colorized_logger
from resourcescope.standalone_utilities.warning_translation import WarningTranslation

logger = colorized_logger(__name__)

T = TypeVar('T')


class ScopedResource:
    """
    Holds only construction parameters until a scope is opened; every scope
    acquires a fresh resource, so the same object can be used repeatedly, and
    even entered again while already active.

    Subclasses supply `acquire` and `dispose`. Failures inside `dispose` should
    go through `best_effort` so that they never replace the failure that is
    already propagating.
    """
    settings: ScopeSettings

    def __init__(self, settings: ScopeSettings | None = None):
        self.settings = settings if settings is not None else default_settings()
        self._active: list[ExitStack] = []

    def acquire(self) -> Any:
        return None

    def dispose(self, handle: Any) -> None:
        pass

    def expose(self, handle: Any) -> Any:
        """What the body receives for an acquired handle; the handle itself by default."""
        return handle

    def translation(self) -> WarningTranslation:
        return WarningTranslation(self.settings.ignored_warnings)

    @contextmanager
    def scope(self) -> Iterator[Any]:
        logger.debug('Opening %s.', self)
        with self.translation():
            handle = self.acquire()
            try:
                yield self.expose(handle)
            finally:
                self.dispose(handle)
                logger.debug('Released %s.', self)

    def invoke(self, body: Callable[..., T], handle: Any) -> T:
        return body(handle)

    def run(self, body: Callable[..., T]) -> T:
        with self.scope() as handle:
            return self.invoke(body, handle)

    def while_(self, body: Callable[..., T]) -> T:
        """Alias of `run`, for call sites where it reads better."""
        return self.run(body)

    def best_effort(self, step: Callable[[], Any], action: str, level: int = logging.DEBUG) -> None:
        try:
            step()
        except Exception:
            logger.log(level, 'Ignoring failure to %s for %s.', action, self, exc_info=True)

    def __enter__(self):
        stack = ExitStack()
        handle = stack.enter_context(self.scope())
        self._active.append(stack)
        return handle

    def __exit__(self, exc_type, exc_value, traceback):
        return self._active.pop().__exit__(exc_type, exc_value, traceback)

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


class UnitScope(ScopedResource):
    """A scope that acquires nothing; its body is called without arguments."""

    def invoke(self, body: Callable[[], T], handle: Any) -> T:
        return body()
