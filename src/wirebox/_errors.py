from __future__ import annotations

from typing import Any


class ContainerError(Exception):
    """Base class for every error raised by the container."""


class NotFoundError(ContainerError, KeyError):
    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class ResolutionError(ContainerError):
    pass


class ClassResolutionError(ResolutionError):
    pass


class CallableResolutionError(ResolutionError):
    pass


class ParameterResolutionError(ResolutionError):
    """Raised when no rule can supply a value for a formal parameter.

    `parameter` is the parameter name and `target` the class or callable that
    declares it.
    """

    def __init__(self, msg: str, *, parameter: str, target: Any) -> None:
        super().__init__(msg)
        self.parameter = parameter
        self.target = target
