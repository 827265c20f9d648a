import pytest

from affordances import (
    Affordance,
    AffordanceBuilder,
    AmbiguousOperationError,
    HttpMethod,
    Link,
    ResolutionError,
    UnroutableOperationError,
    afford,
    and_affordances,
    capture,
    resolve,
    with_affordances,
)
from affordances.routers.orders import OrderController
from affordances.utils.routing import Controller, route


class Counting(Controller):
    prefix = "/things"
    calls = 0

    def __init__(self):
        raise AssertionError("stand-in must not instantiate the handler")

    @route.post("")
    def make(self):
        Counting.calls += 1

    @route.api_route("/{thing_id}", methods=["GET", "HEAD"])
    def peek(self, thing_id: int):
        Counting.calls += 1

    @route.api_route("/{thing_id}/trace", methods=["TRACE"])
    def trace(self, thing_id: int):
        Counting.calls += 1

    @route.post("/{thing_id}/archive")
    def _archive(self, thing_id: int):
        Counting.calls += 1

    def _helper(self):
        Counting.calls += 1


@pytest.fixture
def order_link():
    return Link(href="/orders/42", rel="order")


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------
def test_afford_resolves_cancel_operation():
    affordance = afford(OrderController, lambda orders: orders.cancel(42))

    assert affordance == Affordance(
        name="cancel",
        method=HttpMethod.DELETE,
        path="/orders/{id}/cancel",
        href="/orders/42/cancel",
        input_schema=None,
        output_schema="OrderRead",
    )


def test_afford_reports_input_schema():
    affordance = afford(OrderController, lambda orders: orders.update_order(7))

    assert affordance.method is HttpMethod.PATCH
    assert affordance.input_schema == "OrderUpdate"
    assert affordance.href == "/orders/7"


def test_afford_without_arguments_keeps_template():
    affordance = afford(OrderController, lambda orders: orders.reorder())

    assert affordance.href == affordance.path == "/orders/{id}/reorder"


def test_resolution_never_runs_handler_code():
    afford(Counting, lambda things: things.make())

    assert Counting.calls == 0


def test_capture_returns_every_recorded_call():
    invocations = capture(OrderController, lambda orders: (orders.cancel(1), orders.reorder(1)))

    assert [i.operation for i in invocations] == ["cancel", "reorder"]


def test_resolve_accepts_captured_invocations():
    invocations = capture(OrderController, lambda orders: orders.reorder(5))

    assert resolve(OrderController, invocations).href == "/orders/5/reorder"


@pytest.mark.parametrize(
    "block",
    [
        lambda orders: None,
        lambda orders: orders.cancel,
        lambda orders: (orders.cancel(1), orders.reorder(1)),
    ],
    ids=["nothing", "attribute-only", "two-calls"],
)
def test_afford_requires_exactly_one_operation(block):
    with pytest.raises(AmbiguousOperationError) as excinfo:
        afford(OrderController, block)

    assert excinfo.value.handler_type is OrderController


def test_afford_rejects_route_with_several_methods():
    with pytest.raises(AmbiguousOperationError) as excinfo:
        afford(Counting, lambda things: things.peek(1))

    assert excinfo.value.operation == "peek"


def test_afford_rejects_unroutable_operation():
    with pytest.raises(UnroutableOperationError) as excinfo:
        afford(OrderController, lambda orders: orders.as_router())

    assert excinfo.value.operation == "as_router"


def test_afford_rejects_arguments_that_do_not_bind():
    with pytest.raises(UnroutableOperationError):
        afford(OrderController, lambda orders: orders.cancel(1, unknown=True))


def test_afford_rejects_method_outside_http_method_enum():
    with pytest.raises(UnroutableOperationError) as excinfo:
        afford(Counting, lambda things: things.trace(1))

    assert excinfo.value.handler_type is Counting
    assert excinfo.value.operation == "trace"


def test_afford_resolves_routed_underscore_operation():
    affordance = afford(Counting, lambda things: things._archive(3))

    assert (affordance.name, affordance.href) == ("_archive", "/things/3/archive")
    assert Counting.calls == 0


def test_unrouted_underscore_operation_aborts_scope(order_link):
    def configure(affordances):
        affordances.declare(Counting, lambda things: things._helper())

    with pytest.raises(UnroutableOperationError) as excinfo:
        with_affordances(order_link, configure)

    assert excinfo.value.operation == "_helper"
    assert order_link.affordances == ()


def test_resolution_errors_share_a_base_class():
    assert issubclass(AmbiguousOperationError, ResolutionError)
    assert issubclass(UnroutableOperationError, ResolutionError)


# -----------------------------------------------------------------------------
# Collector
# -----------------------------------------------------------------------------
def test_builder_starts_empty():
    builder = AffordanceBuilder()

    assert builder.build() == []
    assert len(builder) == 0


def test_builder_keeps_declaration_order():
    builder = AffordanceBuilder()

    builder.declare(OrderController, lambda orders: orders.reorder(1))
    builder.declare(Counting, lambda things: things.make())
    builder.declare(OrderController, lambda orders: orders.cancel(1))

    assert [a.name for a in builder] == ["reorder", "make", "cancel"]


def test_builder_does_not_deduplicate():
    builder = AffordanceBuilder()

    builder.declare(OrderController, lambda orders: orders.cancel(42))
    builder.declare(OrderController, lambda orders: orders.cancel(42))

    first, second = builder.build()
    assert first == second
    assert len(builder) == 2


def test_build_is_repeatable_and_returns_copies():
    builder = AffordanceBuilder()
    builder.declare(OrderController, lambda orders: orders.cancel(42))

    snapshot = builder.build()
    snapshot.clear()

    assert builder.build() == builder.build()
    assert len(builder.build()) == 1


def test_builder_copies_seed_affordances():
    seed = [afford(OrderController, lambda orders: orders.cancel(1))]
    builder = AffordanceBuilder(seed)

    builder.declare(OrderController, lambda orders: orders.reorder(1))

    assert len(seed) == 1
    assert [a.name for a in builder.build()] == ["cancel", "reorder"]


def test_failed_declaration_appends_nothing():
    builder = AffordanceBuilder()

    with pytest.raises(AmbiguousOperationError):
        builder.declare(OrderController, lambda orders: None)

    assert builder.build() == []


# -----------------------------------------------------------------------------
# Link attachment
# -----------------------------------------------------------------------------
def test_empty_scope_yields_equal_new_link(order_link):
    result = with_affordances(order_link, lambda affordances: None)

    assert result == order_link
    assert result is not order_link
    assert result.affordances == ()


def test_single_cancel_declaration(order_link):
    result = with_affordances(
        order_link,
        lambda affordances: affordances.declare(OrderController, lambda orders: orders.cancel(42)),
    )

    assert result.href == "/orders/42"
    assert result.rel == "order"
    assert len(result.affordances) == 1
    cancel = result.affordances[0]
    assert (cancel.name, cancel.method, cancel.path) == ("cancel", HttpMethod.DELETE, "/orders/{id}/cancel")


def test_cancel_then_reorder_keeps_order(order_link):
    def configure(affordances):
        affordances.declare(OrderController, lambda orders: orders.cancel(42))
        affordances.declare(OrderController, lambda orders: orders.reorder(42))

    result = with_affordances(order_link, configure)

    assert [(a.name, a.method) for a in result.affordances] == [
        ("cancel", HttpMethod.DELETE),
        ("reorder", HttpMethod.POST),
    ]
    assert list(result.affordances) == [
        afford(OrderController, lambda orders: orders.cancel(42)),
        afford(OrderController, lambda orders: orders.reorder(42)),
    ]


@pytest.mark.parametrize(
    "failing, error",
    [
        (lambda orders: None, AmbiguousOperationError),
        (lambda orders: orders.not_an_endpoint(), UnroutableOperationError),
    ],
)
def test_resolution_error_aborts_scope(order_link, failing, error):
    def configure(affordances):
        affordances.declare(OrderController, lambda orders: orders.cancel(42))
        affordances.declare(OrderController, failing)

    with pytest.raises(error):
        with_affordances(order_link, configure)

    assert order_link == Link(href="/orders/42", rel="order")
    reused = with_affordances(
        order_link,
        lambda affordances: affordances.declare(OrderController, lambda orders: orders.reorder(42)),
    )
    assert [a.name for a in reused.affordances] == ["reorder"]


def test_errors_from_configure_propagate_unchanged(order_link):
    class Boom(Exception):
        pass

    def configure(affordances):
        raise Boom()

    with pytest.raises(Boom):
        with_affordances(order_link, configure)


def test_and_affordances_is_the_same_entry_point(order_link):
    result = and_affordances(
        order_link,
        lambda affordances: affordances.declare(OrderController, lambda orders: orders.cancel(42)),
    )

    assert [a.name for a in result.affordances] == ["cancel"]
