from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._container import Container


_UNSET: Any = object()


class Lifetime(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class Builder(ABC):
    """Knows how to produce the value stored under a container entry."""

    @abstractmethod
    def build(self, container: Container) -> Any: ...


class ValueBuilder(Builder):
    """Returns the wrapped value as-is."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def build(self, container: Container) -> Any:
        return self.value


class SingletonBuilder(Builder):
    """Calls the builder function once and caches its result.

    The cache lives on the builder instance, so every alias sharing this
    builder sees the same value. `None` is a valid cached result.
    """

    def __init__(self, builder: Callable[[Container], Any]) -> None:
        self._builder = builder
        self._instance: Any = _UNSET

    @property
    def built(self) -> bool:
        return self._instance is not _UNSET

    def build(self, container: Container) -> Any:
        if self._instance is _UNSET:
            self._instance = self._builder(container)
        return self._instance


class FactoryBuilder(Builder):
    """Calls the builder function on every build."""

    def __init__(self, builder: Callable[[Container], Any]) -> None:
        self._builder = builder

    def build(self, container: Container) -> Any:
        return self._builder(container)


def builder_for(fn: Callable[[Container], Any], lifetime: Lifetime) -> Builder:
    if lifetime is Lifetime.SINGLETON:
        return SingletonBuilder(fn)
    return FactoryBuilder(fn)
