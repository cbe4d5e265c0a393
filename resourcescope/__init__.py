"""Block level scopes that acquire a resource and always release it."""
from resourcescope.context import archive
from resourcescope.context import dbapi_transaction
from resourcescope.context import file
from resourcescope.context import http_session
from resourcescope.context import image
from resourcescope.context import new_image
from resourcescope.context import no_output
from resourcescope.context import sqlite_transaction
from resourcescope.context import stream
from resourcescope.context import suppress_errors
from resourcescope.context import tmpfile
from resourcescope.errors import AcquisitionError
from resourcescope.errors import ArchiveError
from resourcescope.errors import PlatformSignalError
from resourcescope.errors import ScopedResourceError
from resourcescope.settings import ScopeSettings
from resourcescope.settings import load_settings
