"""Type representations produced by parsing a type expression.

Every variant is a frozen dataclass, so structurally equal types compare
equal and hash alike whether or not a registry interned them.
"""

from __future__ import annotations

from dataclasses import dataclass

# ── Types ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class UnknownType:
    """The ``?`` type."""


@dataclass(frozen=True)
class PrimitiveType:
    name: str


@dataclass(frozen=True)
class NamedType:
    """A declared type, referenced by its dotted name."""

    name: str


@dataclass(frozen=True)
class ListType:
    element: Type


@dataclass(frozen=True)
class MapType:
    key: Type
    value: Type


@dataclass(frozen=True)
class RecordType:
    fields: tuple[tuple[str, Type], ...] = ()

    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    def field_type(self, name: str) -> Type | None:
        for field_name, ty in self.fields:
            if field_name == name:
                return ty
        return None


@dataclass(frozen=True)
class UnionType:
    members: tuple[Type, ...]


Type = (
    UnknownType | PrimitiveType | NamedType | ListType
    | MapType | RecordType | UnionType
)


# ── Built-in type constants ─────────────────────────────────────

UNKNOWN = UnknownType()

ANY = PrimitiveType("any")
NULL = PrimitiveType("null")
BOOL = PrimitiveType("bool")
INT = PrimitiveType("int")
FLOAT = PrimitiveType("float")
NUMBER = PrimitiveType("number")
STRING = PrimitiveType("string")
HTML = PrimitiveType("html")
ATTRIBUTES = PrimitiveType("attributes")
CSS = PrimitiveType("css")
URI = PrimitiveType("uri")
JS = PrimitiveType("js")

BUILTINS: dict[str, Type] = {
    ty.name: ty
    for ty in (ANY, NULL, BOOL, INT, FLOAT, NUMBER, STRING, HTML, ATTRIBUTES, CSS, URI, JS)
}


# ── Type utilities ──────────────────────────────────────────────


def type_name(ty: Type) -> str:
    """Canonical text for *ty*; parsing it back yields an equal type."""
    if isinstance(ty, UnknownType):
        return "?"
    if isinstance(ty, (PrimitiveType, NamedType)):
        return ty.name
    if isinstance(ty, ListType):
        return f"list<{type_name(ty.element)}>"
    if isinstance(ty, MapType):
        return f"map<{type_name(ty.key)}, {type_name(ty.value)}>"
    if isinstance(ty, RecordType):
        fields = ", ".join(f"{name}: {type_name(t)}" for name, t in ty.fields)
        return f"[{fields}]"
    if isinstance(ty, UnionType):
        return "|".join(type_name(m) for m in ty.members)
    raise TypeError(f"not a type: {ty!r}")


def make_union(members: list[Type]) -> Type:
    """Union of *members* in order; a single member is returned unwrapped."""
    if not members:
        raise ValueError("a union needs at least one member")
    if len(members) == 1:
        return members[0]
    return UnionType(tuple(members))
