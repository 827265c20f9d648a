from affordances.exceptions import (
    AmbiguousOperationError,
    ResolutionError,
    UnroutableOperationError,
)
from affordances.models.hateoas import Affordance, HttpMethod, Link
from affordances.utils.hateoas import (
    AffordanceBuilder,
    afford,
    and_affordances,
    capture,
    resolve,
    with_affordances,
)
from affordances.utils.routing import Controller, method_on, route

__all__ = [
    "Affordance",
    "AffordanceBuilder",
    "AmbiguousOperationError",
    "Controller",
    "HttpMethod",
    "Link",
    "ResolutionError",
    "UnroutableOperationError",
    "afford",
    "and_affordances",
    "capture",
    "method_on",
    "resolve",
    "route",
    "with_affordances",
]
