from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from affordances.exceptions import AmbiguousOperationError, UnroutableOperationError
from affordances.models.hateoas import Affordance, HttpMethod, Link
from affordances.utils.routing import (
    Invocation,
    expand_path,
    method_on,
    recorded_invocations,
    route_info,
)

logger = logging.getLogger(__name__)

C = TypeVar("C")

OperationBlock = Callable[[Any], Any]


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------
def capture(handler_type: Type[C], block: OperationBlock) -> List[Invocation]:
    """Run ``block`` against a stand-in of ``handler_type`` and return what it called."""
    stand_in = method_on(handler_type)
    block(stand_in)
    return recorded_invocations(stand_in)


def resolve(handler_type: Type[C], invocations: Sequence[Invocation]) -> Affordance:
    """
    Turn exactly one captured invocation into an Affordance.

    Raises AmbiguousOperationError when zero or several invocations were
    captured, or when the route answers to more than one HTTP method.
    Raises UnroutableOperationError when the operation has no routing metadata.
    """
    if len(invocations) != 1:
        operations = ", ".join(invocation.operation for invocation in invocations) or "nothing"
        logger.debug("Ambiguous capture on %s: %s", handler_type, operations)
        raise AmbiguousOperationError(
            f"Expected exactly one operation on {getattr(handler_type, '__name__', handler_type)}, "
            f"captured {len(invocations)} ({operations})",
            handler_type=handler_type,
        )

    invocation = invocations[0]
    info = route_info(handler_type, invocation.operation)

    if len(info.methods) != 1:
        raise AmbiguousOperationError(
            f"{handler_type.__name__}.{info.operation} is routed for {', '.join(info.methods)}",
            handler_type=handler_type,
            operation=info.operation,
        )

    try:
        method = HttpMethod(info.methods[0])
    except ValueError as exc:
        raise UnroutableOperationError(
            f"{handler_type.__name__}.{info.operation} uses unsupported method {info.methods[0]}",
            handler_type=handler_type,
            operation=info.operation,
        ) from exc

    arguments = info.bind(invocation.args, invocation.kwargs)

    affordance = Affordance(
        name=info.name,
        method=method,
        path=info.path,
        href=expand_path(info.path, arguments),
        input_schema=info.input_model.__name__ if info.input_model else None,
        output_schema=info.output_model.__name__ if info.output_model else None,
    )
    logger.debug("Resolved %s.%s to %s %s", handler_type.__name__, info.operation, affordance.method.value, affordance.href)
    return affordance


def afford(handler_type: Type[C], block: OperationBlock) -> Affordance:
    """
    Resolve a single operation outside of a builder scope.

        afford(OrderController, lambda orders: orders.cancel(42))
    """
    return resolve(handler_type, capture(handler_type, block))


# -----------------------------------------------------------------------------
# Collector
# -----------------------------------------------------------------------------
class AffordanceBuilder:
    """Accumulates affordances, in declaration order, for one link."""

    def __init__(self, affordances: Optional[Iterable[Affordance]] = None) -> None:
        self._affordances: List[Affordance] = list(affordances or ())

    def declare(self, handler_type: Type[C], block: OperationBlock) -> None:
        self._affordances.append(afford(handler_type, block))

    def build(self) -> List[Affordance]:
        return list(self._affordances)

    def __len__(self) -> int:
        return len(self._affordances)

    def __iter__(self) -> Iterator[Affordance]:
        return iter(self.build())


# -----------------------------------------------------------------------------
# Link attachment
# -----------------------------------------------------------------------------
def with_affordances(link: Link, configure: Callable[[AffordanceBuilder], Any]) -> Link:
    """
    Return a copy of ``link`` carrying the affordances declared by ``configure``.

        def configure(affordances):
            affordances.declare(OrderController, lambda orders: orders.cancel(42))
            affordances.declare(OrderController, lambda orders: orders.reorder(42))

        link = with_affordances(Link(href="/orders/42", rel="order"), configure)

    Errors raised inside ``configure`` propagate and nothing is attached.
    """
    builder = AffordanceBuilder()
    configure(builder)
    return link.and_affordances(builder.build())


and_affordances = with_affordances
