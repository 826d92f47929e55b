"""Response shape normalization.

The API sometimes returns a payload directly and sometimes nests it under a
named field ({"properties": [...]} vs [...]). Each resource declares, once,
which wrapper fields are acceptable for it. normalize() returns a tagged
result instead of guessing; unwrap() turns a mismatch into an exception.

Rules, in order:
1. The body already has the expected kind -> the body itself.
   A record body that carries one of its own wrapper keys is not taken
   as-is; rule 2 applies.
2. The body is an object holding a declared wrapper whose value has the
   expected kind -> that value.
3. Anything else -> ShapeMismatch.
"""

from __future__ import annotations

__all__ = [
    "AGENT",
    "AGENTS",
    "ANY_OBJECT",
    "FAVORITES",
    "Normalized",
    "PROPERTIES",
    "PROPERTY",
    "REVIEW",
    "REVIEWS",
    "ResourceShape",
    "ShapeMismatch",
    "normalize",
    "unwrap",
]

from dataclasses import dataclass
from typing import Any, Literal

from homesphere.exceptions import UnexpectedResponseShape


@dataclass(frozen=True)
class ResourceShape:
    """Declared shape of one resource's responses.

    Attributes:
        name: Resource name for error messages.
        kind: "list" for collections, "record" for single objects,
            "any" for action endpoints whose body is passed through.
        wrappers: Field names the payload may be nested under.
    """

    name: str
    kind: Literal["list", "record", "any"]
    wrappers: tuple[str, ...] = ()


@dataclass(frozen=True)
class Normalized:
    """Successful normalization."""

    payload: Any
    wrapper: str | None = None


@dataclass(frozen=True)
class ShapeMismatch:
    """The body matched no declared shape."""

    shape: ResourceShape
    observed: str

    @property
    def message(self) -> str:
        expected = "a list" if self.shape.kind == "list" else "an object"
        wrappers = ", ".join(repr(w) for w in self.shape.wrappers) or "none"
        return (
            f"Unexpected {self.shape.name} response: expected {expected} "
            f"(directly or under {wrappers}), got {self.observed}"
        )


PROPERTIES = ResourceShape("properties", "list", ("properties",))
PROPERTY = ResourceShape("property", "record", ("property",))
FAVORITES = ResourceShape("favorites", "list", ("properties", "favorites"))
REVIEWS = ResourceShape("reviews", "list", ("reviews",))
REVIEW = ResourceShape("review", "record", ("review",))
AGENTS = ResourceShape("agents", "list", ("agents",))
AGENT = ResourceShape("agent", "record", ("agent",))
ANY_OBJECT = ResourceShape("response", "any")


def _has_kind(value: Any, kind: str) -> bool:
    if kind == "list":
        return isinstance(value, list)
    return isinstance(value, dict)


def _describe(body: Any) -> str:
    if isinstance(body, dict):
        keys = ", ".join(sorted(str(k) for k in body)[:5])
        return f"object with keys [{keys}]"
    if isinstance(body, list):
        return "list"
    return type(body).__name__


def normalize(body: Any, shape: ResourceShape) -> Normalized | ShapeMismatch:
    """Extract the payload of ``body`` according to ``shape``."""
    if shape.kind == "any":
        return Normalized(body)

    if _has_kind(body, shape.kind):
        nested = shape.kind == "record" and any(w in body for w in shape.wrappers)
        if not nested:
            return Normalized(body)

    if isinstance(body, dict):
        for wrapper in shape.wrappers:
            if wrapper in body and _has_kind(body[wrapper], shape.kind):
                return Normalized(body[wrapper], wrapper=wrapper)

    return ShapeMismatch(shape, _describe(body))


def unwrap(body: Any, shape: ResourceShape) -> Any:
    """Return the normalized payload.

    Raises:
        UnexpectedResponseShape: If the body matches no declared shape.
    """
    result = normalize(body, shape)
    if isinstance(result, ShapeMismatch):
        raise UnexpectedResponseShape(result.message)
    return result.payload
