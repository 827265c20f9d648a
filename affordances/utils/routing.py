from __future__ import annotations

import inspect
import logging
import re
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

from fastapi import APIRouter
from pydantic import BaseModel

from affordances.exceptions import UnroutableOperationError

logger = logging.getLogger(__name__)

ROUTE_ATTRIBUTE = "__route__"

# {id} and Starlette's converter form {id:int}
_PATH_VARIABLE = re.compile(r"\{(\w+)(?::[^}]*)?\}")


# -----------------------------------------------------------------------------
# Route declaration
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RouteSpec:
    """Routing metadata attached to a handler method by the ``route`` decorators."""
    path: str
    methods: Tuple[str, ...]
    name: Optional[str] = None
    response_model: Any = None
    options: Dict[str, Any] = field(default_factory=dict)


class RouteDecorators:
    """
    Marks handler methods as routable, mirroring ``APIRouter``'s decorators.

    The decorated function is returned unchanged; the metadata is stored on it
    so it can be read without calling the method.
    """

    def api_route(
        self,
        path: str,
        *,
        methods: List[str],
        name: Optional[str] = None,
        response_model: Any = None,
        **options: Any,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        spec = RouteSpec(
            path=path,
            methods=tuple(method.upper() for method in methods),
            name=name,
            response_model=response_model,
            options=options,
        )

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            setattr(func, ROUTE_ATTRIBUTE, spec)
            return func

        return decorator

    def get(self, path: str, **kwargs: Any):
        return self.api_route(path, methods=["GET"], **kwargs)

    def post(self, path: str, **kwargs: Any):
        return self.api_route(path, methods=["POST"], **kwargs)

    def put(self, path: str, **kwargs: Any):
        return self.api_route(path, methods=["PUT"], **kwargs)

    def patch(self, path: str, **kwargs: Any):
        return self.api_route(path, methods=["PATCH"], **kwargs)

    def delete(self, path: str, **kwargs: Any):
        return self.api_route(path, methods=["DELETE"], **kwargs)


route = RouteDecorators()


class Controller:
    """
    Base class for handler types.

    Subclasses set ``prefix``/``tags`` and decorate methods with ``route``.
    """
    prefix: str = ""
    tags: Tuple[str, ...] = ()

    @classmethod
    def routes(cls) -> Dict[str, RouteSpec]:
        """Routable methods by attribute name, in declaration order."""
        found: Dict[str, RouteSpec] = {}
        for klass in reversed(cls.__mro__):
            for attr in vars(klass):
                spec = getattr(getattr(cls, attr, None), ROUTE_ATTRIBUTE, None)
                if isinstance(spec, RouteSpec):
                    found[attr] = spec
        return found

    @classmethod
    def as_router(cls, *args: Any, **kwargs: Any) -> APIRouter:
        """Instantiate the handler and mount its routes on a new ``APIRouter``."""
        handler = cls(*args, **kwargs)
        router = APIRouter(prefix=cls.prefix, tags=list(cls.tags))

        for attr, spec in cls.routes().items():
            options = dict(spec.options)
            if spec.response_model is not None:
                options["response_model"] = spec.response_model
            router.add_api_route(
                spec.path,
                getattr(handler, attr),
                methods=list(spec.methods),
                name=spec.name or attr,
                **options,
            )
        return router


# -----------------------------------------------------------------------------
# Introspection
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RouteInfo:
    handler_type: Any
    operation: str
    name: str
    methods: Tuple[str, ...]
    path: str
    signature: inspect.Signature
    input_model: Optional[type] = None
    output_model: Optional[type] = None

    def bind(self, args: Tuple[Any, ...], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
        """Map captured call arguments to parameter names."""
        try:
            bound = self.signature.bind_partial(*args, **kwargs)
        except TypeError as exc:
            raise UnroutableOperationError(
                f"Arguments do not match '{self.operation}{self.signature}': {exc}",
                handler_type=self.handler_type,
                operation=self.operation,
            ) from exc
        return dict(bound.arguments)


def _is_model(candidate: Any) -> bool:
    return inspect.isclass(candidate) and issubclass(candidate, BaseModel)


def _model_of(hint: Any) -> Optional[type]:
    """The pydantic model behind ``hint``, unwrapping Annotated and Optional."""
    if _is_model(hint):
        return hint

    origin = typing.get_origin(hint)
    if origin is typing.Annotated:
        return _model_of(typing.get_args(hint)[0])
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(members) == 1:
            return _model_of(members[0])
    return None


def route_info(handler_type: Any, operation: str) -> RouteInfo:
    """
    Read the routing metadata of ``handler_type.operation``.

    Raises UnroutableOperationError when the handler type is not a class, has
    no such attribute, or the attribute was not declared with ``route``.
    """
    if not inspect.isclass(handler_type):
        raise UnroutableOperationError(
            f"{handler_type!r} is not a handler type",
            handler_type=handler_type,
            operation=operation,
        )

    endpoint = getattr(handler_type, operation, None)
    spec = getattr(endpoint, ROUTE_ATTRIBUTE, None)
    if not callable(endpoint) or not isinstance(spec, RouteSpec):
        raise UnroutableOperationError(
            f"{handler_type.__name__}.{operation} is not a routable operation",
            handler_type=handler_type,
            operation=operation,
        )

    try:
        hints = typing.get_type_hints(endpoint)
        signature = inspect.signature(endpoint)
    except (NameError, TypeError, ValueError) as exc:
        raise UnroutableOperationError(
            f"Cannot introspect {handler_type.__name__}.{operation}: {exc}",
            handler_type=handler_type,
            operation=operation,
        ) from exc

    # Plain functions looked up on the class still expect the receiver
    if not isinstance(inspect.getattr_static(handler_type, operation), (staticmethod, classmethod)):
        signature = signature.replace(parameters=list(signature.parameters.values())[1:])

    input_model = next(
        (_model_of(hint) for param, hint in hints.items() if param != "return" and _model_of(hint)),
        None,
    )
    output_model = _model_of(spec.response_model) or _model_of(hints.get("return"))

    return RouteInfo(
        handler_type=handler_type,
        operation=operation,
        name=spec.name or operation,
        methods=spec.methods,
        path=getattr(handler_type, "prefix", "") + spec.path,
        signature=signature,
        input_model=input_model,
        output_model=output_model,
    )


def expand_path(path: str, arguments: Mapping[str, Any]) -> str:
    """Fill path variables from ``arguments``; variables without a value stay templated."""

    def replace(match: "re.Match[str]") -> str:
        value = arguments.get(match.group(1))
        if value is None:
            return match.group(0)
        if isinstance(value, Enum):
            value = value.value
        return quote(str(value), safe="")

    return _PATH_VARIABLE.sub(replace, path)


# -----------------------------------------------------------------------------
# Invocation capture
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Invocation:
    """A recorded call against a handler type's stand-in."""
    handler_type: Any
    operation: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)


class InvocationRecorder:
    """
    Stand-in for a handler type.

    Every non-dunder attribute is a callable that records the call instead of
    running it. The handler type itself is never instantiated.
    """

    def __init__(self, handler_type: Any) -> None:
        self._handler_type = handler_type
        self._invocations: List[Invocation] = []

    def __getattr__(self, operation: str) -> Callable[..., None]:
        # Protocol lookups (copy, pickle, ...) are not operations
        if operation.startswith("__") and operation.endswith("__"):
            raise AttributeError(operation)

        def record(*args: Any, **kwargs: Any) -> None:
            self._invocations.append(
                Invocation(self._handler_type, operation, tuple(args), dict(kwargs))
            )

        record.__name__ = operation
        return record

    def __repr__(self) -> str:
        name = getattr(self._handler_type, "__name__", repr(self._handler_type))
        return f"<method_on({name})>"


def method_on(handler_type: Any) -> InvocationRecorder:
    return InvocationRecorder(handler_type)


def recorded_invocations(recorder: InvocationRecorder) -> List[Invocation]:
    """Invocations captured so far, oldest first."""
    return list(recorder._invocations)
