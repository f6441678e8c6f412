"""Unit tests for the Tag value object."""

import pytest

from contact_tag_index.core.tag import Tag, format_tags, is_valid_tag_name


class TestTag:
    def test_equality_by_name(self) -> None:
        assert Tag("friends") == Tag("friends")
        assert hash(Tag("friends")) == hash(Tag("friends"))

    def test_case_sensitive(self) -> None:
        assert Tag("friends") != Tag("Friends")

    def test_str_and_repr(self) -> None:
        assert str(Tag("friends")) == "friends"
        assert repr(Tag("friends")) == "Tag('friends')"

    def test_immutable(self) -> None:
        tag = Tag("friends")
        with pytest.raises(AttributeError):
            tag.name = "colleagues"  # type: ignore[misc]

    @pytest.mark.parametrize("name", ["", "owes money", "a_b", "#hash", "日本"])
    def test_invalid_names_rejected(self, name: str) -> None:
        with pytest.raises(ValueError, match="alphanumeric"):
            Tag(name)

    def test_non_str_rejected(self) -> None:
        with pytest.raises(TypeError):
            Tag(123)  # type: ignore[arg-type]


class TestHelpers:
    def test_is_valid_tag_name(self) -> None:
        assert is_valid_tag_name("owesMoney") is True
        assert is_valid_tag_name("cs2103") is True
        assert is_valid_tag_name("owes-money") is False

    def test_format_tags_sorted(self) -> None:
        assert format_tags({Tag("friends"), Tag("colleagues")}) == "colleagues, friends"
        assert format_tags([]) == ""
