"""
Pydantic models for the call-tree DSL.

These define the canonical request representation and the response envelope.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# Reserved call names interpreted by the engine itself
COMPOSE = "::compose"
WHEN = "::when"
META_OPERATORS = frozenset({COMPOSE, WHEN})


class CallNode(BaseModel):
    """
    Canonical request unit.

    Input: ["viewer", {"token": "abc"}, "id", ["friends", "name"]]
    Normalized:
        CallNode(
            name="viewer",
            args={"token": "abc"},
            children=[CallNode(name="id"), CallNode(name="friends", children=[CallNode(name="name")])],
        )
    """
    name: str
    args: Optional[dict[str, Any]] = None
    children: list[CallNode] = Field(default_factory=list)

    @property
    def is_compose(self) -> bool:
        return self.name == COMPOSE

    @property
    def is_when(self) -> bool:
        return self.name == WHEN

    @property
    def is_meta(self) -> bool:
        return self.name in META_OPERATORS

    def to_wire(self) -> Any:
        """Encode back to the JSON array form."""
        if not self.children and self.args is None and not self.is_meta:
            return self.name
        out: list[Any] = [self.name]
        if self.args is not None:
            out.append(self.args)
        out.extend(child.to_wire() for child in self.children)
        return out


class ResultEnvelope(BaseModel):
    """
    Response for one request.

    Success (possibly partial): {"data": {...}, "errors": [["bar", "failed"]]}
    Structural failure:         {"errors": [["processingError", "..."]]}
    """
    data: Optional[Any] = None
    errors: Optional[list[list[str]]] = None

    @classmethod
    def success(cls, data: Any, errors: Optional[list[list[str]]] = None) -> ResultEnvelope:
        if errors:
            return cls(data=data, errors=errors)
        return cls(data=data)

    @classmethod
    def failure(cls, tag: str, message: str) -> ResultEnvelope:
        return cls(errors=[[tag, message]])

    @property
    def ok(self) -> bool:
        return "data" in self.model_fields_set

    def to_dict(self) -> dict[str, Any]:
        """Envelope as sent to clients; absent keys are omitted."""
        return self.model_dump(exclude_unset=True)


CallNode.model_rebuild()
