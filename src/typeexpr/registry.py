"""Type registry: resolves declared names and canonicalizes composite types."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from typeexpr.types import (
    BUILTINS,
    ListType,
    MapType,
    NamedType,
    RecordType,
    Type,
)

if TYPE_CHECKING:
    from typeexpr.config import TypeExprConfig

logger = logging.getLogger(__name__)


class DuplicateTypeError(Exception):
    """A name is already bound to a different type."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"type '{name}' is already declared")


@runtime_checkable
class TypeRegistry(Protocol):
    """What the parser needs from a registry.

    All four calls must be deterministic: structurally equal arguments give
    equal results.
    """

    def resolve(self, name: str) -> Type | None: ...

    def get_or_create_list(self, element: Type) -> Type: ...

    def get_or_create_map(self, key: Type, value: Type) -> Type: ...

    def get_or_create_record(self, fields: Mapping[str, Type]) -> Type: ...


class DefaultTypeRegistry:
    """Keeps track of all types known in one context.

    Named types are keyed by their fully qualified name. Composite types are
    interned by shape, so asking twice for ``list<int>`` hands back the very
    same object; the cache is lock-protected for concurrent parses.
    """

    def __init__(self, declared: Iterable[str] = ()) -> None:
        self._named: dict[str, Type] = dict(BUILTINS)
        self._interned: dict[Type, Type] = {}
        self._lock = threading.Lock()
        for name in declared:
            self.declare(name)

    @classmethod
    def from_config(cls, config: TypeExprConfig) -> DefaultTypeRegistry:
        return cls(config.types.declared)

    def declare(self, name: str, ty: Type | None = None) -> Type:
        """Bind *name* to *ty* (a NamedType of that name by default).

        Re-declaring the same binding is a no-op; rebinding a name to a
        different type raises DuplicateTypeError.
        """
        name = name.strip()
        new = ty if ty is not None else NamedType(name)
        with self._lock:
            existing = self._named.get(name)
            if existing is not None:
                if existing != new:
                    raise DuplicateTypeError(name)
                return existing
            self._named[name] = new
        logger.debug("declared type %s", name)
        return new

    def has_type(self, name: str) -> bool:
        return name in self._named

    @property
    def names(self) -> list[str]:
        return sorted(self._named)

    # ── TypeRegistry ─────────────────────────────────────────────

    def resolve(self, name: str) -> Type | None:
        return self._named.get(name)

    def get_or_create_list(self, element: Type) -> Type:
        return self._intern(ListType(element))

    def get_or_create_map(self, key: Type, value: Type) -> Type:
        return self._intern(MapType(key, value))

    def get_or_create_record(self, fields: Mapping[str, Type]) -> Type:
        return self._intern(RecordType(tuple(fields.items())))

    def _intern(self, ty: Type) -> Type:
        with self._lock:
            canonical = self._interned.get(ty)
            if canonical is None:
                canonical = self._interned[ty] = ty
                logger.debug("interned %r", ty)
            return canonical
