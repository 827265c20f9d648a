from __future__ import annotations

from enum import Enum as PyEnum
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class HttpMethod(str, PyEnum):
    """HTTP method an affordance is invoked with"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


# -----------------------------------------------------------------------------
# Pydantic Models
# -----------------------------------------------------------------------------
class Affordance(BaseModel):
    """A follow-up operation reachable from a link."""
    name: str = Field(
        ...,
        description="Name of the operation (route name)"
    )
    method: HttpMethod = Field(
        ...,
        description="HTTP method used to invoke the operation"
    )
    path: str = Field(
        ...,
        description="Path template of the operation, e.g. /orders/{id}/cancel"
    )
    href: str = Field(
        ...,
        description="Path template expanded with the captured path arguments"
    )
    input_schema: Optional[str] = Field(
        None,
        description="Name of the model the operation accepts as request body"
    )
    output_schema: Optional[str] = Field(
        None,
        description="Name of the model the operation responds with"
    )

    model_config = ConfigDict(frozen=True)


class Link(BaseModel):
    """Immutable reference to a resource, optionally carrying affordances."""
    href: str = Field(
        ...,
        description="URI or URI template of the target resource"
    )
    rel: str = Field(
        "self",
        description="Relation name, e.g. 'self', 'order'"
    )
    affordances: Tuple[Affordance, ...] = Field(
        (),
        description="Follow-up operations, in declaration order"
    )

    model_config = ConfigDict(frozen=True)

    def and_affordances(self, affordances: Iterable[Affordance]) -> "Link":
        """Return a copy of this link with ``affordances`` appended to its own."""
        return self.model_copy(
            update={"affordances": self.affordances + tuple(affordances)}
        )
