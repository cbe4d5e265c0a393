"""Environment-derived settings shared by all scoped resources."""
import builtins
import logging
import os
from functools import cache
from typing import Mapping

from attrs import define
from attrs import field
from attrs import validators

ENVIRONMENT_PREFIX = 'RESOURCESCOPE_'


def _positive(instance, attribute, value) -> None:
    if value <= 0:
        raise ValueError(f'{attribute.name} must be positive, got {value}.')


def _log_level_name(instance, attribute, value) -> None:
    if not isinstance(logging.getLevelName(value), int):
        raise ValueError(f'Unrecognized log level: {value}')


def _warning_categories(instance, attribute, value) -> None:
    for category in value:
        if not (isinstance(category, type) and issubclass(category, Warning)):
            raise ValueError(f'Not a warning category: {category!r}')


@define(frozen=True)
class ScopeSettings:
    """
    `ignored_warnings` lists the warning categories that are not turned into
    failures while a scope is active; they are dropped instead.
    """
    ignored_warnings: tuple[type[Warning], ...] = field(
        default=(),
        converter=tuple,
        validator=_warning_categories,
    )
    chunk_multiplier: int = field(default=1024, validator=[validators.instance_of(int), _positive])
    advisory_locks: bool = True
    log_level: str = field(default='WARNING', converter=str.upper, validator=_log_level_name)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ('1', 'true', 'yes', 'on'):
        return True
    if normalized in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f'Expected a boolean value, got "{value}".')


def _parse_categories(value: str) -> tuple[type[Warning], ...]:
    categories = []
    for name in filter(None, (part.strip() for part in value.split(','))):
        category = getattr(builtins, name, None)
        if category is None:
            raise ValueError(f'Unknown warning category: {name}')
        categories.append(category)
    return tuple(categories)


def load_settings(environ: Mapping[str, str] | None = None) -> ScopeSettings:
    if environ is None:
        environ = os.environ
    kwargs = {}
    ignored = environ.get(ENVIRONMENT_PREFIX + 'IGNORED_WARNINGS')
    if ignored is not None:
        kwargs['ignored_warnings'] = _parse_categories(ignored)
    multiplier = environ.get(ENVIRONMENT_PREFIX + 'CHUNK_MULTIPLIER')
    if multiplier is not None:
        kwargs['chunk_multiplier'] = int(multiplier)
    locks = environ.get(ENVIRONMENT_PREFIX + 'ADVISORY_LOCKS')
    if locks is not None:
        kwargs['advisory_locks'] = _parse_bool(locks)
    level = environ.get(ENVIRONMENT_PREFIX + 'LOG_LEVEL')
    if level is not None:
        kwargs['log_level'] = level
    return ScopeSettings(**kwargs)


@cache
def default_settings() -> ScopeSettings:
    return load_settings()
