import pytest
from pydantic import ValidationError

from affordances.models.hateoas import Affordance, HttpMethod, Link


def make_affordance(name: str = "cancel", method: HttpMethod = HttpMethod.DELETE) -> Affordance:
    return Affordance(
        name=name,
        method=method,
        path="/orders/{id}/cancel",
        href="/orders/42/cancel",
    )


def test_link_defaults_to_self_without_affordances():
    link = Link(href="/orders/42")

    assert link.rel == "self"
    assert link.affordances == ()


def test_and_affordances_returns_new_link_and_keeps_original():
    link = Link(href="/orders/42", rel="order")
    cancel = make_affordance()

    result = link.and_affordances([cancel])

    assert result is not link
    assert result.href == "/orders/42"
    assert result.rel == "order"
    assert result.affordances == (cancel,)
    assert link.affordances == ()


def test_and_affordances_appends_after_existing_ones():
    cancel = make_affordance("cancel")
    reorder = make_affordance("reorder", HttpMethod.POST)
    link = Link(href="/orders/42").and_affordances([cancel])

    result = link.and_affordances([reorder])

    assert [a.name for a in result.affordances] == ["cancel", "reorder"]


def test_and_affordances_with_nothing_is_equal_but_distinct():
    link = Link(href="/orders/42", rel="order")

    result = link.and_affordances([])

    assert result == link
    assert result is not link


def test_link_and_affordance_are_frozen():
    link = Link(href="/orders/42")
    affordance = make_affordance()

    with pytest.raises(ValidationError):
        link.rel = "order"
    with pytest.raises(ValidationError):
        affordance.name = "other"


def test_affordances_compare_by_value():
    assert make_affordance() == make_affordance()
    assert make_affordance("cancel") != make_affordance("reorder")


def test_affordance_dump_uses_method_value():
    dumped = make_affordance().model_dump(mode="json")

    assert dumped["method"] == "DELETE"
    assert dumped["input_schema"] is None
