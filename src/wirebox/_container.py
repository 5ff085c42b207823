from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._builders import Builder, FactoryBuilder, Lifetime, SingletonBuilder, ValueBuilder, builder_for
from ._errors import ContainerError, NotFoundError
from ._providers import ServiceProvider
from ._resolver import Resolver, _is_protocol, qualified_name


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from ._providers import Delegate, ProviderLike

    T = TypeVar("T")

    Token = type | str
    Aliases = str | Iterable[str]


def _key(token: Token) -> str:
    if isinstance(token, str):
        return token
    if inspect.isclass(token):
        return qualified_name(token)
    msg = f"Container ids must be strings or classes, got {token!r}"
    raise TypeError(msg)


def _alias_keys(aliases: Aliases | Token) -> list[str]:
    if isinstance(aliases, str) or inspect.isclass(aliases):
        return [_key(aliases)]
    return [_key(a) for a in aliases]


class Container:
    """Dependency injection container.

    - store values, singletons and factories under string ids (or classes,
      keyed by their qualified name)
    - share one builder between an id and its aliases
    - fall back to delegate containers for missing ids
    - build classes and call functions with their parameters auto-wired.

    A container is not thread-safe. Callers sharing one across threads must
    serialize access themselves.
    """

    def __init__(self) -> None:
        self._items: dict[str, Builder] = {}
        self._containers: list[Delegate] = []
        self._resolver = Resolver(self)

    def has(self, id: Token) -> bool:  # noqa: A002
        key = _key(id)
        if key in self._items:
            return True
        return any(container.has(key) for container in self._containers)

    def get(self, id: Token) -> Any:  # noqa: A002
        key = _key(id)
        builder = self._items.get(key)
        if builder is not None:
            return builder.build(self)

        for container in self._containers:
            if container.has(key):
                return container.get(key)

        msg = f"Container item {key!r} not found."
        raise NotFoundError(msg)

    __contains__ = has
    __getitem__ = get

    def set(self, id: Token, value: Any, aliases: Aliases = ()) -> None:  # noqa: A002
        """Store a value, wrapping it in a `ValueBuilder` unless it already is a `Builder`.

        Example:
          container.set("config", {"env": "prod"})
          container.set(Fuel, Fuel("diesel"), aliases="fuel")

        """
        builder = value if isinstance(value, Builder) else ValueBuilder(value)
        for key in (_key(id), *_alias_keys(aliases)):
            if key in self._items:
                logger.debug("Replacing container item %r", key)
            self._items[key] = builder

    def singleton(self, id: Token, builder: Callable[[Container], Any], aliases: Aliases = ()) -> None:  # noqa: A002
        """Store a builder function that runs on the first `get` only."""
        self.set(id, SingletonBuilder(builder), aliases)

    def factory(self, id: Token, builder: Callable[[Container], Any], aliases: Aliases = ()) -> None:  # noqa: A002
        """Store a builder function that runs on every `get`."""
        self.set(id, FactoryBuilder(builder), aliases)

    def bind(
        self,
        id: Token,  # noqa: A002
        impl: type | str,
        *,
        lifetime: Lifetime = Lifetime.SINGLETON,
        aliases: Aliases = (),
    ) -> None:
        """Store a class to be built with `make` when the id is requested.

        Example:
          container.bind(Repository, SqlRepository)
          container.bind("mailer", SmtpMailer, lifetime=Lifetime.TRANSIENT)

        """
        if inspect.isclass(id) and inspect.isclass(impl) and not _is_protocol(id) and not issubclass(impl, id):
            msg = f"Implementation {impl.__name__} must be a subclass of {id.__name__}"
            raise TypeError(msg)

        self.set(id, builder_for(lambda container: container.make(impl), lifetime), aliases)

    def alias(self, aliases: Aliases, id: Token) -> None:  # noqa: A002
        """Make every alias return what `id` returns, sharing its builder."""
        builder = self._find_builder(_key(id))
        for key in _alias_keys(aliases):
            self._items[key] = builder

    def add_container(self, container: Delegate) -> None:
        """Consult `container` for ids missing here, after any delegate added before it."""
        self._containers.append(container)

    def create_scope(self) -> Container:
        """Create a container that prefers its own entries and falls back to this one."""
        scope = Container()
        scope.add_container(self)
        return scope

    def register(self, providers: ProviderLike | Iterable[ProviderLike]) -> None:
        """Let one or more service providers register their entries.

        Each provider is an instance, a class, or a dotted class name; classes
        and names are built with `make` first.
        """
        if isinstance(providers, (str, type)) or not _is_iterable(providers):
            providers = [providers]

        for provider in providers:
            if isinstance(provider, (str, type)):
                provider = self.make(provider)  # noqa: PLW2901

            if not isinstance(provider, ServiceProvider) or not callable(provider.register):
                msg = f"{type(provider).__qualname__} is not a service provider: it has no register(container) method"
                raise ContainerError(msg)

            logger.debug("Registering service provider %s", type(provider).__qualname__)
            provider.register(self)

    @overload
    def make(self, cls: type[T], hints: Mapping[str, Any] | None = None) -> T: ...

    @overload
    def make(self, cls: str, hints: Mapping[str, Any] | None = None) -> Any: ...

    def make(self, cls: type | str, hints: Mapping[str, Any] | None = None) -> Any:
        """Build a new instance of `cls`, auto-wiring its constructor parameters.

        `hints` supplies values by parameter name, or by type for class-typed
        parameters. Nothing is cached: every call builds a new instance.
        """
        return self._resolver.make(cls, hints or {})

    def make_callable(self, callable_like: Any, hints: Mapping[str, Any] | None = None) -> Callable[..., Any]:
        return self._resolver.make_callable(callable_like, hints or {})

    def call(self, callable_like: Any, hints: Mapping[str, Any] | None = None) -> Any:
        """Call `callable_like` with its parameters auto-wired and return its result."""
        return self._resolver.call(callable_like, hints or {})

    def get_arguments(self, callable_like: Any, hints: Mapping[str, Any] | None = None) -> list[Any]:
        """Resolve the arguments `call` would pass, in declaration order, without calling."""
        return self._resolver.get_arguments(callable_like, hints or {})

    def _find_builder(self, key: str) -> Builder:
        if key in self._items:
            return self._items[key]

        for container in self._containers:
            if not container.has(key):
                continue
            if isinstance(container, Container):
                return container._find_builder(key)  # noqa: SLF001
            # Foreign delegates expose no builders; share their lookup instead.
            return FactoryBuilder(lambda _, c=container: c.get(key))

        msg = f"Container item {key!r} not found."
        raise NotFoundError(msg)


def _is_iterable(obj: Any) -> bool:
    try:
        iter(obj)
    except TypeError:
        return False
    else:
        return True
