"""
Temporarily turns warnings into exceptions, so that no operation inside a
scope degrades silently to a logged warning.
"""
import warnings

from resourcescope.errors import PlatformSignalError
from resourcescope.standalone_utilities.chainable_destructable_resource import ChainableDestructableResource


class WarningTranslation(ChainableDestructableResource):
    """
    Installs an "error" action for all warning categories (except those listed
    in `ignored`, which are dropped) on creation, and restores the exact filter
    state that was active before on release. Nested translations therefore
    unwind in stack order.

    A warning that leaves the guarded block is re-raised as a
    `PlatformSignalError` chained to the original warning.

    The warning filters are process-wide, so overlapping translations in
    different threads are not supported.
    """
    ignored: tuple[type[Warning], ...]

    def __init__(self, ignored: tuple[type[Warning], ...] = ()):
        self.ignored = tuple(ignored)
        self._filters = warnings.catch_warnings()
        self._filters.__enter__()
        warnings.simplefilter('error')
        for category in self.ignored:
            warnings.filterwarnings('ignore', category=category)

    def release(self) -> None:
        self._filters.__exit__(None, None, None)

    def __exit__(self, exc_type, exc_value, traceback):
        self._release()
        if isinstance(exc_value, Warning) and not isinstance(exc_value, self.ignored):
            raise PlatformSignalError(exc_value) from exc_value
