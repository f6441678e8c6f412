"""Integration tests: address book workflows keep the tag index consistent.

アドレス帳経由の操作列のあとでも、カタログとメンバー表が整合していることを確認する。
"""

import pytest

from contact_tag_index.address_book import AddressBook
from contact_tag_index.core.exceptions import TagNotFoundError
from contact_tag_index.core.health import run_health_checks
from contact_tag_index.core.person import Person
from contact_tag_index.core.tag import Tag
from contact_tag_index.core.tag_index import IntegrityPolicy, UniqueTagIndex

FRIENDS = Tag("friends")
COLLEAGUES = Tag("colleagues")
FAMILY = Tag("family")


def _assert_unique(index: UniqueTagIndex) -> None:
    tags = index.tags()
    assert len(tags) == len(set(tags))
    for tag in tags:
        members = index.persons_with_tag(tag)
        for i, member in enumerate(members):
            assert not any(other.is_same_person(member) for other in members[:i])


class TestUniqueness:
    def test_mixed_operations_keep_uniqueness(self) -> None:
        """追加・編集・削除を繰り返してもカタログとリストに重複が無いこと."""
        alice = Person("Alice", "1", tags=[FRIENDS])
        bob = Person("Bob", "2", tags=[FRIENDS, COLLEAGUES])
        book = AddressBook([alice, bob])

        book.add_tag_types([FAMILY, FRIENDS])
        book.tag_index.add_person_to_tags(alice)
        alice2 = alice.with_tags([FRIENDS, FAMILY])
        book.set_person(alice, alice2)
        book.tag_index.add_person_to_tags(alice2)
        carol = Person("Carol", "3", tags=[FAMILY])
        book.add_person(carol)
        book.remove_person(bob)
        book.add_person(bob.edited(remark="back"))

        _assert_unique(book.tag_index)
        assert run_health_checks(book).is_healthy
        assert book.tag_index.persons_with_tag(FAMILY) == (alice2, carol)


class TestCascadeDelete:
    def test_no_holder_keeps_deleted_tag(self) -> None:
        holders = [Person(f"P{i}", str(i), tags=[FRIENDS, COLLEAGUES]) for i in range(5)]
        book = AddressBook(holders)

        book.tag_index.delete_tag_type(FRIENDS)

        assert FRIENDS not in book.tag_index.get_tags()
        assert all(FRIENDS not in p.tags for p in holders)
        assert len(book.tag_index.persons_with_tag(COLLEAGUES)) == 5
        assert run_health_checks(book).is_healthy


class TestIdempotentAdd:
    def test_second_add_reports_already_present(self) -> None:
        index = UniqueTagIndex()

        assert index.add_tag_types({FAMILY}) == set()
        before = index.copy()
        assert index.add_tag_types({FAMILY}) == {FAMILY}
        assert index == before


class TestRoundTripRebuild:
    def test_set_tags_with_copy_of_itself(self) -> None:
        persons = [
            Person("Alice", "1", tags=[FRIENDS]),
            Person("Bob", "2", tags=[FRIENDS, COLLEAGUES]),
            Person("Carol", "3"),
        ]
        index = UniqueTagIndex(persons, catalog=[FAMILY])
        original = index.copy()

        index.set_tags(index.copy())

        assert index == original
        assert index.tags() == original.tags()


class TestRemovalSymmetry:
    def test_remove_from_all_tags_twice(self) -> None:
        alice = Person("Alice", "1", tags=[FRIENDS, COLLEAGUES])
        bob = Person("Bob", "2", tags=[FRIENDS])
        index = UniqueTagIndex([alice, bob])

        index.remove_person_from_all_tags(alice)
        after_first = index.copy()
        index.remove_person_from_all_tags(alice)

        assert index.persons_with_tag(FRIENDS) == (bob,)
        assert index.persons_with_tag(COLLEAGUES) == ()
        assert index == after_first


class TestFriendsScenario:
    def _run_until_delete(self, policy: IntegrityPolicy) -> tuple[AddressBook, Person]:
        book = AddressBook(catalog=[FRIENDS, COLLEAGUES], policy=policy)
        p1 = Person("P1", "1", tags=[FRIENDS])

        assert book.add_person(p1) == set()
        assert book.tag_index.persons_with_tag(FRIENDS) == (p1,)

        book.tag_index.delete_tag_type(FRIENDS)

        assert book.tag_index.get_tags() == {COLLEAGUES}
        assert FRIENDS not in p1.tags
        return book, p1

    def test_permissive(self) -> None:
        book, p1 = self._run_until_delete(IntegrityPolicy.PERMISSIVE)
        stale_copy = p1.with_tags([FRIENDS])

        assert book.tag_index.add_person_to_tags(stale_copy) == {FRIENDS}
        assert book.tag_index.persons_with_tag(COLLEAGUES) == ()
        assert FRIENDS not in book.tag_index

    def test_strict(self) -> None:
        book, p1 = self._run_until_delete(IntegrityPolicy.STRICT)
        stale_copy = p1.with_tags([FRIENDS])

        with pytest.raises(TagNotFoundError):
            book.tag_index.add_person_to_tags(stale_copy)
        assert book.tag_index.persons_with_tag(COLLEAGUES) == ()
