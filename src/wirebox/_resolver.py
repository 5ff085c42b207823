from __future__ import annotations

import builtins
import importlib
import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin

from ._errors import CallableResolutionError, ClassResolutionError, ParameterResolutionError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ._container import Container

    # A class and the classes whose construction is waiting on it
    Chain = tuple[type, ...]

_EMPTY: Any = inspect.Parameter.empty
_NONE_TYPE = type(None)


@dataclass(frozen=True)
class Parameter:
    """A formal parameter of a class constructor or callable.

    `annotation` holds the declared class, or None when the parameter is
    untyped or annotated with something that is not a class (multi-member
    unions, `Any`, builtin or abstract-collection generics). `Optional[X]`
    and `X | None` are unwrapped to `X` with `nullable` set, and a
    subscripted user generic `Box[int]` to `Box`.
    """

    name: str
    # one of the inspect.Parameter kind constants
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    annotation: type | None = None
    builtin: bool = False
    default: Any = _EMPTY
    nullable: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY

    @classmethod
    def from_inspect(cls, p: inspect.Parameter) -> Parameter:
        annotation, nullable = _describe_annotation(p.annotation)
        return cls(
            name=p.name,
            kind=p.kind,
            annotation=annotation,
            builtin=annotation is not None and annotation.__module__ == "builtins",
            default=p.default,
            nullable=nullable,
        )


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def locate(path: str) -> Any:
    """Return the object named by a dotted path, e.g. ``"os.path.basename"``.

    The longest importable module prefix is imported and the remaining parts
    are looked up as attributes. Names that do not start with a module are
    looked up in `builtins`, so ``"len"`` and ``"str.lower"`` work too.

    Raises LookupError when nothing matches.
    """
    parts = path.split(".")
    if not all(parts):
        msg = f"Invalid dotted path: {path!r}"
        raise LookupError(msg)

    for index in range(len(parts), 0, -1):
        module_name = ".".join(parts[:index])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only swallow "this prefix is not a module", not failures inside it
            if e.name is None or not (module_name == e.name or module_name.startswith(e.name + ".")):
                raise
            continue
        return _walk_attributes(obj, parts[index:], path)

    return _walk_attributes(builtins, parts, path)


def _walk_attributes(obj: Any, attributes: list[str], path: str) -> Any:
    for attr in attributes:
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            msg = f"Cannot locate {path!r}: no attribute {attr!r} on {obj!r}"
            raise LookupError(msg) from e
    return obj


class Resolver:
    """Resolves formal parameters against a container.

    Resolution precedence, per parameter, first match wins:
    1. hint with the parameter's name
    2. for a parameter annotated with a non-builtin class:
       a. container entry keyed by the class' qualified name
       b. first hint value that is an instance of the class
       c. a new instance built with `make`, forwarding all hints
    3. for an untyped or builtin-typed parameter:
       a. default
       b. None, when the annotation is optional
    4. error.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    def make(self, target: type | str, hints: Mapping[str, Any], chain: Chain = ()) -> Any:
        cls = self._locate_class(target)

        if cls in chain:
            path = " -> ".join(c.__qualname__ for c in (*chain, cls))
            msg = f"Circular dependency detected while building {cls.__qualname__}: {path}"
            raise ClassResolutionError(msg)

        params = self.parameters_of(cls)
        if not params:
            return cls()

        values = self.resolve(params, hints, cls, (*chain, cls))
        args, kwargs = _split_call(params, values)
        return cls(*args, **kwargs)

    def make_callable(self, callable_like: Any, hints: Mapping[str, Any]) -> Callable[..., Any]:
        """Turn a callable-like into something that can be introspected and invoked.

        Accepted shapes:
        - ``(instance_or_class, "method")``
        - functions, bound methods, builtins and instances defining ``__call__``
        - ``"pkg.module.Class@method"``: the class is built with `make`
        - a class defining ``__call__``, or its dotted name: built with `make`
        - the dotted name of a function
        """
        if isinstance(callable_like, tuple):
            if len(callable_like) == 2 and isinstance(callable_like[1], str):  # noqa: PLR2004
                owner, method = callable_like
                return self._method_of(owner, method)
            msg = f"Expected an (instance, 'method') pair, got {callable_like!r}"
            raise CallableResolutionError(msg)

        if isinstance(callable_like, str):
            return self._callable_from_string(callable_like, hints)

        if inspect.isclass(callable_like):
            return self._invocable_instance(callable_like, hints)

        if callable(callable_like):
            return callable_like

        msg = f"Cannot resolve a callable from {callable_like!r}"
        raise CallableResolutionError(msg)

    def get_arguments(self, callable_like: Any, hints: Mapping[str, Any]) -> list[Any]:
        _, _, values = self.prepare_call(callable_like, hints)
        return values

    def call(self, callable_like: Any, hints: Mapping[str, Any]) -> Any:
        fn, params, values = self.prepare_call(callable_like, hints)
        args, kwargs = _split_call(params, values)
        return fn(*args, **kwargs)

    def prepare_call(
        self, callable_like: Any, hints: Mapping[str, Any]
    ) -> tuple[Callable[..., Any], list[Parameter], list[Any]]:
        fn = self.make_callable(callable_like, hints)
        params = self.parameters_of(fn)
        return fn, params, self.resolve(params, hints, fn)

    def parameters_of(self, target: Any) -> list[Parameter]:
        """Formal parameters of a class constructor or a callable, variadics excluded."""
        error = ClassResolutionError if inspect.isclass(target) else CallableResolutionError
        try:
            sig = _signature(target)
        except (ValueError, TypeError, SyntaxError) as e:
            msg = f"Cannot introspect the signature of {_describe(target)}: {e}"
            raise error(msg) from e

        return [
            Parameter.from_inspect(p)
            for p in sig.parameters.values()
            if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        ]

    def resolve(
        self,
        params: list[Parameter],
        hints: Mapping[str, Any],
        target: Any,
        chain: Chain = (),
    ) -> list[Any]:
        return [self.resolve_param(p, hints, target, chain) for p in params]

    def resolve_param(self, p: Parameter, hints: Mapping[str, Any], target: Any, chain: Chain = ()) -> Any:
        # 1) explicit hint by name
        if p.name in hints:
            return hints[p.name]

        # 2) class-typed
        if p.annotation is not None and not p.builtin:
            key = qualified_name(p.annotation)
            if self._container.has(key):
                logger.debug("Parameter '%s' of %s resolved from entry %r", p.name, _describe(target), key)
                return self._container.get(key)

            if not _is_protocol(p.annotation) or _is_runtime_checkable_protocol(p.annotation):
                for value in hints.values():
                    if isinstance(value, p.annotation):
                        logger.debug("Parameter '%s' of %s matched a hint by type %s", p.name, _describe(target), key)
                        return value

            logger.debug("Parameter '%s' of %s resolved by building %s", p.name, _describe(target), key)
            return self.make(p.annotation, hints, chain)

        # 3) default / optional
        if p.has_default:
            return p.default

        if p.nullable:
            return None

        # 4) error
        ann_repr = p.annotation.__name__ if p.annotation is not None else "no-annotation"
        msg = (
            f"Cannot satisfy parameter '{p.name}' for {_describe(target)}. "
            f"No hint/registration/default found (annotation: {ann_repr})."
        )
        raise ParameterResolutionError(msg, parameter=p.name, target=target)

    def _locate_class(self, target: type | str) -> type:
        if isinstance(target, str):
            try:
                obj = locate(target)
            except (ImportError, LookupError) as e:
                msg = f"Cannot locate class {target!r}"
                raise ClassResolutionError(msg) from e
        else:
            obj = target

        if not inspect.isclass(obj):
            msg = f"{target!r} does not name a class"
            raise ClassResolutionError(msg)

        if _is_protocol(obj):
            msg = f"Cannot instantiate protocol {obj.__qualname__}"
            raise ClassResolutionError(msg)

        if inspect.isabstract(obj):
            msg = f"Cannot instantiate abstract class {obj.__qualname__}"
            raise ClassResolutionError(msg)

        return obj

    def _callable_from_string(self, name: str, hints: Mapping[str, Any]) -> Callable[..., Any]:
        if "@" in name:
            class_name, _, method = name.partition("@")
            if not class_name or not method:
                msg = f"Expected 'Class@method', got {name!r}"
                raise CallableResolutionError(msg)
            return self._method_of(self.make(class_name, hints), method)

        try:
            obj = locate(name)
        except (ImportError, LookupError) as e:
            msg = f"Cannot locate callable {name!r}"
            raise CallableResolutionError(msg) from e

        if inspect.isclass(obj):
            return self._invocable_instance(obj, hints)

        if callable(obj):
            return obj

        msg = f"{name!r} does not name a callable"
        raise CallableResolutionError(msg)

    def _invocable_instance(self, cls: type, hints: Mapping[str, Any]) -> Callable[..., Any]:
        if not any("__call__" in vars(klass) for klass in cls.__mro__):
            msg = f"{cls.__qualname__} does not define __call__"
            raise CallableResolutionError(msg)
        return self.make(cls, hints)

    def _method_of(self, owner: Any, name: str) -> Callable[..., Any]:
        method = getattr(owner, name, None)
        if method is None or not callable(method):
            msg = f"{_describe(owner)} has no callable attribute {name!r}"
            raise CallableResolutionError(msg)
        return method


def _split_call(params: list[Parameter], values: list[Any]) -> tuple[list[Any], dict[str, Any]]:
    args, kwargs = [], {}
    for p, value in zip(params, values):
        if p.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[p.name] = value
        else:
            args.append(value)
    return args, kwargs


def _describe_annotation(hint: Any) -> tuple[type | None, bool]:
    if hint is _EMPTY or hint is Any:
        return None, False

    origin = get_origin(hint)
    if origin is Annotated:
        return _describe_annotation(get_args(hint)[0])

    if origin is Union or origin is types.UnionType:
        args = get_args(hint)
        members = [a for a in args if a is not _NONE_TYPE]
        nullable = len(members) < len(args)
        if len(members) == 1:
            return _class_of(members[0]), nullable
        return None, nullable

    return _class_of(hint), False


# Generics over these are left untyped: list[int], Callable[..., T], type[T]
_GENERIC_MODULES = frozenset({"builtins", "collections.abc", "typing"})


def _class_of(hint: Any) -> type | None:
    origin = get_origin(hint)
    if origin is None:
        return hint if inspect.isclass(hint) and hint is not Any else None
    if inspect.isclass(origin) and origin.__module__ not in _GENERIC_MODULES:
        return origin
    return None


def _signature(target: Any) -> inspect.Signature:
    """Signature of `target` with string annotations evaluated.

    Annotations naming something undefined are left as strings, which
    `_describe_annotation` treats as untyped.
    """
    try:
        return inspect.signature(target, eval_str=True)
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, _describe(target))
        return inspect.signature(target)


def _describe(target: Any) -> str:
    name = getattr(target, "__qualname__", None)
    if isinstance(name, str):
        return name
    return type(target).__qualname__


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is itself a typing.Protocol, not merely a subclass of one."""
        return inspect.isclass(tp) and bool(getattr(tp, "_is_protocol", False))


def _is_runtime_checkable_protocol(tp: type) -> bool:
    if not _is_protocol(tp):
        return False

    try:
        isinstance(None, tp)
    except TypeError:
        return False
    else:
        return True
