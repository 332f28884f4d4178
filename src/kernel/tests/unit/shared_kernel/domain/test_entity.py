"""Unit tests for the Entity base class."""

from dataclasses import dataclass

import pytest
from ulid import ULID

from shared_kernel.domain import Entity, EntityConfig, Identifiable, is_entity


class UserEntity(Entity[str]):
    pass


class ProductEntity(Entity[str]):
    pass


class CounterEntity(Entity[int]):
    def __init__(self, data=None):
        super().__init__(data, EntityConfig(generate_id=lambda: 42))


@dataclass
class ForeignEntity:
    """Identity-bearing object built outside the kernel."""

    id: str

    def equals(self, other: object) -> bool:
        return getattr(other, "id", None) == self.id


class TestEntityConstruction:
    """Tests for Entity id assignment."""

    def test_generates_ulid_when_no_id_provided(self):
        """A new entity gets a ULID string id."""
        entity = UserEntity({"name": "John", "email": "john@test.com"})

        assert isinstance(entity.id, str)
        ULID.from_str(entity.id)

    def test_uses_provided_id(self):
        """A reconstituted entity keeps the id it was given."""
        entity = UserEntity({"id": "user-123", "name": "John"})

        assert entity.id == "user-123"

    def test_id_is_removed_from_attributes(self):
        """The stored attributes and the identity are disjoint."""
        entity = UserEntity({"id": "user-123", "name": "John"})

        assert "id" not in entity._data
        assert entity._data == {"name": "John"}

    def test_does_not_mutate_caller_data(self):
        """The caller's mapping is copied, not modified."""
        data = {"id": "user-123", "name": "John"}

        UserEntity(data)

        assert data == {"id": "user-123", "name": "John"}

    def test_handles_missing_data(self):
        """Construction never fails for lack of data."""
        entity = UserEntity()

        assert entity.id is not None
        assert entity._data == {}

    def test_generates_different_ids_for_different_instances(self):
        """Generated ids are unique."""
        entity1 = UserEntity({"name": "John"})
        entity2 = UserEntity({"name": "Jane"})

        assert entity1.id != entity2.id

    def test_uses_custom_id_generator(self):
        """A concrete type can plug in its own generator."""
        assert CounterEntity().id == 42

    def test_provided_id_wins_over_custom_generator(self):
        """The generator is only consulted when no id is supplied."""
        assert CounterEntity({"id": 7}).id == 7

    def test_id_is_read_only(self):
        """The id cannot be reassigned."""
        entity = UserEntity()

        with pytest.raises(AttributeError):
            entity.id = "other"  # type: ignore[misc]


class TestEntityEquality:
    """Tests for identity-based equality."""

    def test_same_instance_is_equal(self):
        entity = UserEntity({"name": "John"})

        assert entity.equals(entity)

    def test_different_instances_with_same_id_are_equal(self):
        """Attributes are irrelevant to equality."""
        entity1 = UserEntity({"id": "user-1", "name": "John"})
        entity2 = UserEntity({"id": "user-1", "name": "Jane"})

        assert entity1.equals(entity2)
        assert entity1 == entity2

    def test_different_ids_are_not_equal(self):
        entity1 = UserEntity({"name": "John"})
        entity2 = UserEntity({"name": "John"})

        assert not entity1.equals(entity2)
        assert entity1 != entity2

    def test_none_is_not_equal(self):
        entity = UserEntity({"name": "John"})

        assert entity.equals(None) is False

    def test_non_entity_objects_are_not_equal(self):
        """Plain objects carrying an id are not identity-bearing."""
        entity = UserEntity({"id": "user-1"})

        assert entity.equals({"id": "user-1"}) is False
        assert entity.equals("user-1") is False
        assert entity != {"id": "user-1"}

    def test_cross_type_entities_with_same_id_are_equal(self):
        """Equality is not scoped by concrete type."""
        user = UserEntity({"id": "shared-id", "name": "John"})
        product = ProductEntity({"id": "shared-id", "title": "Widget"})

        assert user.equals(product)
        assert product.equals(user)

    def test_structurally_compatible_objects_are_recognized(self):
        """Any object with an id and equals() counts as an entity."""
        entity = UserEntity({"id": "user-1"})

        assert entity.equals(ForeignEntity(id="user-1"))
        assert not entity.equals(ForeignEntity(id="user-2"))

    def test_equal_entities_hash_alike(self):
        """Entities can be used in sets and as dict keys."""
        entity1 = UserEntity({"id": "user-1", "name": "John"})
        entity2 = UserEntity({"id": "user-1", "name": "Jane"})

        assert hash(entity1) == hash(entity2)
        assert len({entity1, entity2}) == 1


class TestIsEntity:
    """Tests for the is_entity structural check."""

    def test_true_for_entities(self):
        assert is_entity(UserEntity())
        assert is_entity(CounterEntity())

    def test_true_for_structural_matches(self):
        assert is_entity(ForeignEntity(id="x"))
        assert isinstance(ForeignEntity(id="x"), Identifiable)

    def test_false_for_plain_values(self):
        assert not is_entity({"id": "x"})
        assert not is_entity(None)
        assert not is_entity(42)
