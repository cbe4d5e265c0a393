"""Contexts that absorb failures or standard output of a block of code."""
import io
from contextlib import contextmanager
from contextlib import redirect_stdout
from typing import Iterator

from resourcescope.standalone_utilities.log_formats import colorized_logger
from resourcescope.contexts.scoped_resource import UnitScope

logger = colorized_logger(__name__)


class SuppressErrors(UnitScope):
    """
    Runs the body and absorbs any `Exception` it raises, warnings included.
    `KeyboardInterrupt` and `SystemExit` still propagate.
    """

    @contextmanager
    def scope(self) -> Iterator[None]:
        try:
            with self.translation():
                yield None
        except Exception:
            logger.debug('Absorbed failure in %s.', self, exc_info=True)


class SuppressOutput(UnitScope):
    """
    Runs the body with `sys.stdout` redirected into a buffer that is discarded
    on exit, whatever the outcome. Failures of the body propagate.
    """

    @contextmanager
    def scope(self) -> Iterator[None]:
        with self.translation():
            with redirect_stdout(io.StringIO()):
                yield None
