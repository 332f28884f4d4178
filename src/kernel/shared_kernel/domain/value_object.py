"""Value object base class for the shared kernel.

Value objects are immutable descriptors compared by their attributes. The
wrapped bundle is copied into immutable containers at construction, so
neither the caller's original nor anything retrieved through ``value`` can
change the object afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def freeze(value: Any) -> Any:
    """Return a deep, immutable copy of ``value``.

    Mappings become read-only mapping proxies over a private dict, lists and
    tuples become tuples, sets become frozensets. Anything else is returned
    as is.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, Set):
        return frozenset(freeze(item) for item in value)
    return value


def _hashable(value: Any) -> Any:
    # Mapping proxies are not hashable; reduce them to item sets
    if isinstance(value, Mapping):
        return frozenset((key, _hashable(item)) for key, item in value.items())
    if isinstance(value, tuple):
        return tuple(_hashable(item) for item in value)
    return value


class ValueObject(Generic[T]):
    """Base class for objects with structural equality.

    Example:
        >>> class Money(ValueObject[dict]):
        ...     pass
        >>> Money({"amount": 10, "currency": "EUR"}) == Money(
        ...     {"currency": "EUR", "amount": 10}
        ... )
        True
    """

    def __init__(self, value: T) -> None:
        self._value = freeze(value)

    @property
    def value(self) -> T:
        """The frozen bundle. The same object is returned on every access."""
        return self._value

    def equals(self, other: object) -> bool:
        """Deep structural comparison against another value object."""
        if other is None or not isinstance(other, ValueObject):
            return False

        return self._value == other.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueObject):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(_hashable(self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"
