"""Dependency injection container with call-time auto-wiring.

Values are stored under string ids, either as-is, as singletons built on first
use, or as factories built on every use. Classes and callables are resolved by
reading their signatures: each parameter is satisfied from explicit hints, from
the container, by building its annotated class, or from its default.

Exports:
- `Container`: the registry plus `make` / `call` / `get_arguments`.
- `Lifetime`: singleton or transient, for `Container.bind`.
- `Builder` and its variants: strategies stored behind each id.
- `ServiceProvider`: protocol for objects that group registrations.
- `initialize` / `instance` / `reset`: the explicitly-initialized
  process-wide container.
"""

from ._builders import Builder, FactoryBuilder, Lifetime, SingletonBuilder, ValueBuilder
from ._container import Container
from ._errors import (
    CallableResolutionError,
    ClassResolutionError,
    ContainerError,
    NotFoundError,
    ParameterResolutionError,
    ResolutionError,
)
from ._global import initialize, instance, reset
from ._providers import ServiceProvider
from ._resolver import Parameter


__all__ = [
    "Builder",
    "CallableResolutionError",
    "ClassResolutionError",
    "Container",
    "ContainerError",
    "FactoryBuilder",
    "Lifetime",
    "NotFoundError",
    "Parameter",
    "ParameterResolutionError",
    "ResolutionError",
    "ServiceProvider",
    "SingletonBuilder",
    "ValueBuilder",
    "initialize",
    "instance",
    "reset",
]
