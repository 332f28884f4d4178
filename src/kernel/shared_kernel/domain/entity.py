"""Entity base class for the shared kernel.

An entity is an object whose definition is based on identity rather than on
its attributes. Two entities are the same entity when they carry the same id,
no matter how their other attributes differ.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from ulid import ULID

IdT = TypeVar("IdT")


@runtime_checkable
class Identifiable(Protocol):
    """Structural interface of identity-bearing objects.

    Anything exposing an ``id`` and an ``equals`` method is treated as an
    entity by the kernel, regardless of how it was constructed.
    """

    @property
    def id(self) -> Any: ...

    def equals(self, other: object) -> bool: ...


def is_entity(value: object) -> bool:
    """Check whether ``value`` satisfies the entity interface."""
    return value is not None and isinstance(value, Identifiable)


def generate_ulid() -> str:
    """Default id generator: a ULID string.

    ULIDs sort by creation time, which keeps freshly generated ids ordered.
    """
    return str(ULID())


@dataclass(frozen=True)
class EntityConfig(Generic[IdT]):
    """Construction options for an entity.

    Attributes:
        generate_id: Produces the id of a new entity when the data does not
            carry one. Defaults to a ULID string generator.
    """

    generate_id: Callable[[], IdT] | None = None


class Entity(Generic[IdT]):
    """Base class for objects with identity-based equality.

    Also known as reference objects. The optional ``id`` key of ``data``
    allows reconstituting an entity from persistence; otherwise an id is
    generated.

    Example:
        >>> class Product(Entity[int]):
        ...     def __init__(self, data=None):
        ...         super().__init__(data, EntityConfig(generate_id=next_sku))

    Note:
        Equality is not scoped by concrete type: a ``User`` and a ``Product``
        sharing an id compare equal.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        config: EntityConfig[IdT] | None = None,
    ) -> None:
        attributes = dict(data) if data is not None else {}
        supplied_id = attributes.pop("id", None)

        if supplied_id is None:
            generate_id = (
                config.generate_id
                if config is not None and config.generate_id is not None
                else generate_ulid
            )
            supplied_id = generate_id()

        self._id: IdT = supplied_id
        self._data: dict[str, Any] = attributes

    @property
    def id(self) -> IdT:
        """The entity's identifier, fixed at construction."""
        return self._id

    def equals(self, other: object) -> bool:
        """Check whether ``other`` is the same entity.

        Args:
            other: Any object, possibly None

        Returns:
            True if ``other`` is this instance or an identity-bearing object
            with an equal id, False otherwise
        """
        if other is None or not isinstance(other, Identifiable):
            return False

        return other is self or self._id == other.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifiable):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self._id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"
