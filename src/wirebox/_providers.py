from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ._container import Container

    # A provider instance, a provider class, or its dotted name
    ProviderLike = Any


@runtime_checkable
class ServiceProvider(Protocol):
    """Groups related registrations.

    Example:
      class StorageProvider:
          def register(self, container: Container) -> None:
              container.singleton("db", lambda c: connect(c.get("config")["dsn"]))

      container.register([StorageProvider, "myapp.providers.MailProvider"])

    """

    def register(self, container: Container) -> None: ...


@runtime_checkable
class Delegate(Protocol):
    """Anything a container can fall back to for ids it does not hold."""

    def has(self, id: str) -> bool: ...  # noqa: A002

    def get(self, id: str) -> Any: ...  # noqa: A002
