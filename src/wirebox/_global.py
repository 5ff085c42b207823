"""Process-wide container handle.

The handle is empty until `initialize` is called; there is no implicit lazy
creation. Prefer passing a `Container` explicitly and reserve this for entry
points that cannot receive one.
"""

from __future__ import annotations

import logging

from ._container import Container
from ._errors import ContainerError


logger = logging.getLogger(__name__)

_instance: Container | None = None


def initialize(container: Container | None = None, *, replace: bool = False) -> Container:
    """Set the process-wide container, creating an empty one if none is given."""
    global _instance  # noqa: PLW0603

    if _instance is not None and not replace:
        msg = "The process-wide container is already initialized. Pass replace=True to overwrite."
        raise ContainerError(msg)

    _instance = container if container is not None else Container()
    logger.debug("Process-wide container initialized")
    return _instance


def instance() -> Container:
    if _instance is None:
        msg = "The process-wide container is not initialized. Call wirebox.initialize() first."
        raise ContainerError(msg)
    return _instance


def reset() -> None:
    global _instance  # noqa: PLW0603
    _instance = None
