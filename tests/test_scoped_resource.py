"""Tests for the shared scope contract and warning translation."""
import warnings

import pytest

from resourcescope import context
from resourcescope.contexts.scoped_resource import ScopedResource
from resourcescope.errors import PlatformSignalError
from resourcescope.settings import ScopeSettings
from resourcescope.standalone_utilities.chainable_destructable_resource import ChainableDestructableResource
from resourcescope.standalone_utilities.warning_translation import WarningTranslation


class RecordingResource(ScopedResource):
    """Acquires a numbered token and records acquisitions and releases."""

    def __init__(self, fail_acquire: bool = False):
        super().__init__(ScopeSettings())
        self.fail_acquire = fail_acquire
        self.events: list[str] = []
        self.count = 0

    def acquire(self):
        if self.fail_acquire:
            raise OSError('unavailable')
        self.count += 1
        self.events.append(f'acquire {self.count}')
        return self.count

    def dispose(self, handle) -> None:
        self.events.append(f'release {handle}')


def test_run_returns_body_value_and_releases_once() -> None:
    resource = RecordingResource()
    assert resource.run(lambda token: token * 10) == 10
    assert resource.events == ['acquire 1', 'release 1']


def test_while_is_an_alias_of_run() -> None:
    resource = RecordingResource()
    assert resource.while_(lambda token: token + 1) == 2
    assert resource.events == ['acquire 1', 'release 1']


def test_failed_acquisition_never_invokes_body() -> None:
    resource = RecordingResource(fail_acquire=True)
    called = []
    with pytest.raises(OSError):
        resource.run(called.append)
    assert called == []
    assert resource.events == []


def test_body_failure_propagates_after_release() -> None:
    resource = RecordingResource()

    def body(token):
        assert resource.events == ['acquire 1']
        raise KeyError('boom')

    with pytest.raises(KeyError):
        resource.run(body)
    assert resource.events == ['acquire 1', 'release 1']


def test_each_run_acquires_a_fresh_resource() -> None:
    resource = RecordingResource()
    resource.run(lambda token: None)
    resource.run(lambda token: None)
    assert resource.events == ['acquire 1', 'release 1', 'acquire 2', 'release 2']


def test_with_statement_can_reenter_the_same_resource() -> None:
    resource = RecordingResource()
    with resource as outer:
        with resource as inner:
            assert (outer, inner) == (1, 2)
        assert resource.events[-1] == 'release 2'
    assert resource.events == ['acquire 1', 'acquire 2', 'release 2', 'release 1']


def test_warning_inside_scope_is_raised_as_failure() -> None:
    resource = RecordingResource()

    def body(token):
        warnings.warn('disk almost full', RuntimeWarning)

    with pytest.raises(PlatformSignalError) as info:
        resource.run(body)
    assert info.value.category is RuntimeWarning
    assert isinstance(info.value.__cause__, RuntimeWarning)
    assert resource.events == ['acquire 1', 'release 1']


def test_warning_filters_are_restored_after_scope() -> None:
    before = list(warnings.filters)
    with pytest.raises(PlatformSignalError):
        RecordingResource().run(lambda token: warnings.warn('noisy'))
    assert warnings.filters == before
    with pytest.warns(UserWarning):
        warnings.warn('outside any scope')


def test_ignored_warning_categories_are_not_translated() -> None:
    settings = ScopeSettings(ignored_warnings=(DeprecationWarning,))

    def body():
        warnings.warn('old api', DeprecationWarning)
        return 'done'

    assert context.suppress_errors(settings=settings).run(body) == 'done'
    with pytest.raises(PlatformSignalError):
        context.no_output(settings=settings).run(lambda: warnings.warn('new api', FutureWarning))


def test_nested_scope_restores_outer_translation() -> None:
    seen = []

    def outer(file):
        context.suppress_errors().run(lambda: warnings.warn('absorbed inside'))
        seen.append('inner exited')
        warnings.warn('raised by outer', UserWarning)

    with pytest.raises(PlatformSignalError, match='raised by outer'):
        context.tmpfile().run(outer)
    assert seen == ['inner exited']


def test_translation_releases_subresources_in_reverse_order() -> None:
    released = []

    class Marker(ChainableDestructableResource):
        def __init__(self, name):
            self.name = name

        def release(self) -> None:
            released.append(self.name)

    with WarningTranslation() as translation:
        translation.add_subresource(Marker('first'))
        translation.add_subresource(Marker('second'))
    assert released == ['second', 'first']


class Named(ChainableDestructableResource):
    def __init__(self, name: str, released: list, error: Exception | None = None):
        self.name = name
        self.released = released
        self.error = error

    def release(self) -> None:
        self.released.append(self.name)
        if self.error is not None:
            raise self.error


def test_owner_released_after_its_subresources() -> None:
    released = []
    owner = Named('file', released)
    owner.add_subresource(Named('lock', released))
    owner.add_subresource(Named('mapping', released))
    with owner:
        pass
    assert released == ['mapping', 'lock', 'file']


def test_owner_released_when_a_subresource_fails() -> None:
    released = []
    owner = Named('file', released)
    owner.add_subresource(Named('lock', released, error=OSError('unlock failed')))
    owner.add_subresource(Named('mapping', released))
    with pytest.raises(OSError, match='unlock failed'):
        with owner:
            pass
    assert released == ['mapping', 'lock', 'file']
