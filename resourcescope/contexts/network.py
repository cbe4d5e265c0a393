"""HTTP transfer session context."""
from requests import Response
from requests import Session

from resourcescope.settings import ScopeSettings
from resourcescope.contexts.scoped_resource import ScopedResource


class TransferSession(Session):
    """A `requests.Session` bound to one URL, which may be set later."""
    url: str

    def __init__(self, url: str = ''):
        super().__init__()
        self.url = url

    def execute(self, method: str = 'GET', **kwargs) -> Response:
        if not self.url:
            raise ValueError('No URL is bound to this session.')
        return self.request(method, self.url, **kwargs)


class HTTPSession(ScopedResource):
    """
    Passes a fresh `TransferSession` bound to `url` to the body, which sets
    whatever options it needs (headers, auth, adapters) and performs the
    transfer itself. The session is closed on exit.

    For a plain GET or POST without customisation, calling `requests` directly
    is simpler.
    """
    url: str

    def __init__(self, url: str = '', settings: ScopeSettings | None = None):
        super().__init__(settings)
        self.url = url

    def acquire(self) -> TransferSession:
        return TransferSession(self.url)

    def dispose(self, session: TransferSession) -> None:
        self.best_effort(session.close, 'close the session')

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.url}')"
