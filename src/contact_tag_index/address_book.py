"""アドレス帳（人物リスト + タグインデックスの所有者）.

人物の追加・削除・置換のたびにタグインデックスを同期させます。
インデックスはアドレス帳ごとに生成・保持され、データセットを入れ替えると
一緒に作り直されます。
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from contact_tag_index.core.exceptions import DuplicatePersonError, PersonNotFoundError
from contact_tag_index.core.person import TagHolder
from contact_tag_index.core.tag import Tag
from contact_tag_index.core.tag_index import IntegrityPolicy, UniqueTagIndex

if TYPE_CHECKING:
    from contact_tag_index.config import TagIndexConfig


class AddressBook:
    """人物の集合と、それに対応するタグインデックス.

    Args:
        persons: 初期データの人物
        catalog: 事前登録するタグ
        policy: タグインデックスの整合性ポリシー
        atomic_bulk_delete: delete_tag_types で事前検証を行うか

    Raises:
        DuplicatePersonError: persons に同一人物が含まれる場合
        TagNotFoundError: STRICT で、人物のタグが catalog に無い場合
    """

    def __init__(
        self,
        persons: Iterable[TagHolder] = (),
        catalog: Iterable[Tag] = (),
        policy: IntegrityPolicy | str = IntegrityPolicy.PERMISSIVE,
        atomic_bulk_delete: bool = False,
    ) -> None:
        self._persons: list[TagHolder] = []
        for person in persons:
            if self.has_person(person):
                raise DuplicatePersonError(person)
            self._persons.append(person)
        self._tag_index = UniqueTagIndex(self._persons, catalog=catalog, policy=policy)
        self.atomic_bulk_delete = atomic_bulk_delete
        logger.info(f"Loaded address book: {len(self._persons)} person(s), {len(self._tag_index)} tag(s)")

    @classmethod
    def from_config(
        cls,
        config: TagIndexConfig,
        persons: Iterable[TagHolder] = (),
        catalog: Iterable[Tag] = (),
    ) -> AddressBook:
        return cls(
            persons,
            catalog=catalog,
            policy=config.policy,
            atomic_bulk_delete=config.atomic_bulk_delete,
        )

    @property
    def tag_index(self) -> UniqueTagIndex:
        return self._tag_index

    @property
    def persons(self) -> tuple[TagHolder, ...]:
        return tuple(self._persons)

    def has_person(self, person: TagHolder) -> bool:
        return any(p.is_same_person(person) for p in self._persons)

    def _position_of(self, person: TagHolder) -> int:
        for i, p in enumerate(self._persons):
            if p.is_same_person(person):
                return i
        raise PersonNotFoundError(person)

    def add_person(self, person: TagHolder) -> set[Tag]:
        """人物を追加し、タグインデックスに登録する.

        Returns:
            カタログに無かったタグ（PERMISSIVE のみ。人物自体は追加される）

        Raises:
            DuplicatePersonError: 同一人物が既に居る場合
            TagNotFoundError: STRICT で未知のタグを持つ場合（アドレス帳は変化しない）
        """
        if self.has_person(person):
            raise DuplicatePersonError(person)
        missing = self._tag_index.add_person_to_tags(person)
        self._persons.append(person)
        return missing

    def remove_person(self, person: TagHolder) -> None:
        """人物を削除し、全タグのメンバーリストから外す."""
        pos = self._position_of(person)
        removed = self._persons.pop(pos)
        self._tag_index.remove_person_from_all_tags(removed)

    def set_person(self, target: TagHolder, edited: TagHolder) -> set[Tag]:
        """target を編集済みコピー edited で置き換える.

        旧レコードを全タグから外してから、新レコードを登録します。
        STRICT で新レコードが未知のタグを持つ場合は、置き換え前に例外になります。

        Returns:
            カタログに無かったタグ（PERMISSIVE のみ）

        Raises:
            PersonNotFoundError: target が居ない場合
            DuplicatePersonError: edited が target 以外の人物と同一人物になる場合
        """
        pos = self._position_of(target)
        current = self._persons[pos]
        if not current.is_same_person(edited) and self.has_person(edited):
            raise DuplicatePersonError(edited)
        if self._tag_index.is_strict:
            self._tag_index.person_has_valid_tags(edited)

        self._tag_index.remove_person_from_all_tags(current)
        self._persons[pos] = edited
        return self._tag_index.add_person_to_tags(edited)

    def remove_tag_from_person(self, tag: Tag, person: TagHolder) -> None:
        """人物から1つのタグを外す（メンバーリスト側 → 人物側の順）."""
        current = self._persons[self._position_of(person)]
        self._tag_index.remove_person_from_tag(tag, current)
        current.remove_tag(tag)

    def add_tag_types(self, tags: Iterable[Tag]) -> set[Tag]:
        """タグ種別を追加し、既にそのタグを持つ人物をメンバーリストへ登録する.

        PERMISSIVE では未知タグを持ったまま追加された人物が居るため、
        カタログに載った時点でメンバー表に反映させます。

        Returns:
            既にカタログに存在していたタグ
        """
        tags = list(tags)
        already_present = self._tag_index.add_tag_types(tags)
        added = set(tags) - already_present
        if added:
            for person in self._persons:
                if person.tags & added:
                    self._tag_index.add_person_to_tags(person)
        return already_present

    def delete_tag_types(self, tags: Iterable[Tag]) -> None:
        self._tag_index.delete_tag_types(tags, atomic=self.atomic_bulk_delete)

    def reset_data(self, other: AddressBook) -> None:
        """別のアドレス帳の内容で丸ごと置き換える.

        人物とインデックスはまとめて複製するので、以後 other 側の変更
        （カスケード削除など）はこのアドレス帳に影響しません。
        """
        persons, tag_index = copy.deepcopy((other._persons, other._tag_index))
        self._persons = persons
        self._tag_index.set_tags(tag_index)

    def __len__(self) -> int:
        return len(self._persons)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, AddressBook):
            return NotImplemented
        return self._persons == other._persons and self._tag_index == other._tag_index

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AddressBook(persons={len(self._persons)}, tags={len(self._tag_index)})"
