"""Unit tests for the Person entity."""

import pytest

from contact_tag_index.core.person import Person, TagHolder
from contact_tag_index.core.tag import Tag


class TestPersonIdentity:
    def test_same_person_ignores_other_fields(self) -> None:
        """name + phone が同じなら、他のフィールドが違っても同一人物."""
        alice = Person("Alice", "91234567", email="a@example.com", tags=[Tag("friends")])
        edited = alice.edited(email="alice@example.com", tags=[])

        assert alice.is_same_person(edited)
        assert alice != edited

    def test_different_phone_is_different_person(self) -> None:
        assert not Person("Alice", "1").is_same_person(Person("Alice", "2"))

    def test_not_same_as_other_types(self) -> None:
        assert not Person("Alice", "1").is_same_person("Alice")

    def test_value_equality(self) -> None:
        a = Person("Alice", "1", tags=[Tag("friends")])
        b = Person("Alice", "1", tags=[Tag("friends")])

        assert a == b
        assert a is not b

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Person("Alice", "1"))


class TestPersonTags:
    def test_tags_snapshot(self) -> None:
        person = Person("Alice", "1", tags=[Tag("friends")])
        snapshot = person.tags

        person.remove_tag(Tag("friends"))

        assert snapshot == frozenset({Tag("friends")})
        assert person.tags == frozenset()

    def test_remove_missing_tag_is_noop(self) -> None:
        person = Person("Alice", "1", tags=[Tag("friends")])
        person.remove_tag(Tag("colleagues"))

        assert person.tags == {Tag("friends")}

    def test_with_tags_does_not_mutate_original(self) -> None:
        person = Person("Alice", "1", tags=[Tag("friends")])
        copy = person.with_tags([Tag("colleagues")])

        assert person.tags == {Tag("friends")}
        assert copy.tags == {Tag("colleagues")}
        assert copy.is_same_person(person)

    def test_edited_rejects_unknown_field(self) -> None:
        with pytest.raises(TypeError, match="Unknown Person fields"):
            Person("Alice", "1").edited(age=3)

    def test_satisfies_tag_holder_protocol(self) -> None:
        assert isinstance(Person("Alice", "1"), TagHolder)
