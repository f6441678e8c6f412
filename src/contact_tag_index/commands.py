"""タグ管理コマンド.

コマンドはアドレス帳に対して実行され、利用者向けのフィードバック文を返します。
コマンド文字列の解析はここでは扱いません。
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from contact_tag_index.address_book import AddressBook
from contact_tag_index.core.tag import Tag, format_tags

MESSAGE_ADD_SUCCESS = "New tags added: {}"
MESSAGE_DUPLICATE_TAG = "Some tags already exist and were not added: {}"
MESSAGE_NO_TAGS_ADDED = "No new tags were added."
MESSAGE_DELETE_SUCCESS = "Deleted tags: {}"
MESSAGE_TAGS_NOT_FOUND = "Tags not found: {}"
MESSAGE_NO_TAGS_GIVEN = "At least one tag must be given."


class CommandError(Exception):
    """コマンド実行の失敗（メッセージはそのまま利用者に表示できる）."""


@dataclass(frozen=True)
class CommandResult:
    feedback: str


@dataclass(frozen=True)
class AddTagsCommand:
    """タグ種別をカタログに追加する."""

    tags: frozenset[Tag]

    def __init__(self, tags: Iterable[Tag]) -> None:
        object.__setattr__(self, "tags", frozenset(tags))

    def execute(self, book: AddressBook) -> CommandResult:
        already_present = book.add_tag_types(self.tags)
        added = self.tags - already_present

        lines: list[str] = []
        if added:
            lines.append(MESSAGE_ADD_SUCCESS.format(format_tags(added)))
        if already_present:
            lines.append(MESSAGE_DUPLICATE_TAG.format(format_tags(already_present)))
        if not lines:
            raise CommandError(MESSAGE_NO_TAGS_ADDED)
        return CommandResult("\n".join(lines))


@dataclass(frozen=True)
class DeleteTagsCommand:
    """タグ種別を削除し、保持している人物からも外す.

    存在しないタグが1つでもあれば何も削除しません。
    """

    tags: frozenset[Tag]

    def __init__(self, tags: Iterable[Tag]) -> None:
        object.__setattr__(self, "tags", frozenset(tags))

    def execute(self, book: AddressBook) -> CommandResult:
        if not self.tags:
            raise CommandError(MESSAGE_NO_TAGS_GIVEN)

        missing = {tag for tag in self.tags if not book.tag_index.contains_tag(tag)}
        if missing:
            raise CommandError(MESSAGE_TAGS_NOT_FOUND.format(format_tags(missing)))

        book.delete_tag_types(sorted(self.tags, key=lambda t: t.name))
        return CommandResult(MESSAGE_DELETE_SUCCESS.format(format_tags(self.tags)))
