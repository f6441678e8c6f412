"""タグインデックス（カタログ + メンバー表）.

タグ → 人物リスト のマッピングを保持し、カタログ（キー集合）と
各人物が持つタグ集合の整合性を双方向に保ちます。

不変条件:
    - カタログのタグは重複しない（dict のキー）
    - 1つのメンバーリストに同一人物（is_same_person）は高々1件
    - メンバーリスト上の人物は、そのタグを自分のタグ集合に持っている
    - 人物が持つタグはカタログに存在する（PERMISSIVE では欠落を戻り値で報告）

インデックスは所有者（アドレス帳）から明示的に呼ばれたときだけ変化します。
唯一の例外は `delete_tag_type` で、メンバー全員に `remove_tag` を命じてから
カタログからタグを消す（カスケード削除）。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

import polars as pl
from loguru import logger

from .exceptions import PersonNotFoundInTagError, TagNotFoundError
from .person import TagHolder
from .tag import Tag, format_tags


class IntegrityPolicy(str, Enum):
    """参照整合性の欠落をどう扱うか."""

    STRICT = "strict"  # 即座に例外
    PERMISSIVE = "permissive"  # 欠落をデータとして返す


def _require_tag(tag: Tag) -> None:
    if not isinstance(tag, Tag):
        raise TypeError(f"tag must be a Tag, got {type(tag).__name__}")


def _require_person(person: TagHolder) -> None:
    if person is None:
        raise TypeError("person must not be None")


def _find_member(members: list[TagHolder], person: TagHolder) -> int | None:
    """同一人物判定でメンバーリスト上の位置を探す."""
    for i, member in enumerate(members):
        if member.is_same_person(person):
            return i
    return None


class UniqueTagIndex:
    """タグカタログと、タグごとの人物リストを管理するインデックス.

    Args:
        persons: 初期データの人物（タグ集合からメンバー表を構築する）
        catalog: 事前登録するタグ（誰も持っていなくてもカタログに載る）
        policy: 整合性ポリシー（インスタンスごとに1つ、途中で変えない）

    Raises:
        TagNotFoundError: STRICT で、人物のタグが catalog に無い場合
        ValueError: policy が不正な場合
    """

    def __init__(
        self,
        persons: Iterable[TagHolder] = (),
        catalog: Iterable[Tag] = (),
        policy: IntegrityPolicy | str = IntegrityPolicy.PERMISSIVE,
    ) -> None:
        self.policy = IntegrityPolicy(policy)
        self._tag_map: dict[Tag, list[TagHolder]] = {}

        for tag in catalog:
            self.add_tag_type(tag)

        for person in persons:
            self._register_person(person)

    @property
    def is_strict(self) -> bool:
        return self.policy is IntegrityPolicy.STRICT

    def _register_person(self, person: TagHolder) -> None:
        """構築時の取り込み（PERMISSIVE では未知タグを暗黙に登録する）."""
        if not self.is_strict:
            for tag in person.tags:
                if tag not in self._tag_map:
                    logger.debug(f"Registering tag {tag} observed on {person}")
                    self._tag_map[tag] = []
        self.add_person_to_tags(person)

    def _members(self, tag: Tag) -> list[TagHolder]:
        _require_tag(tag)
        try:
            return self._tag_map[tag]
        except KeyError:
            raise TagNotFoundError(tag) from None

    # ------------------------------------------------------------------
    # カタログ
    # ------------------------------------------------------------------

    def contains_tag(self, tag: Tag) -> bool:
        """カタログにタグがあるか."""
        _require_tag(tag)
        return tag in self._tag_map

    def add_tag_type(self, tag: Tag) -> None:
        """タグをカタログに登録する（既にあれば何もしない）."""
        _require_tag(tag)
        if tag in self._tag_map:
            return
        self._tag_map[tag] = []
        logger.info(f"Added tag type: {tag}")

    def add_tag_types(self, tags: Iterable[Tag]) -> set[Tag]:
        """複数のタグをカタログに登録する.

        Args:
            tags: 登録するタグ

        Returns:
            既にカタログに存在していたため追加されなかったタグ
        """
        already_present: set[Tag] = set()
        for tag in tags:
            if self.contains_tag(tag):
                already_present.add(tag)
            else:
                self.add_tag_type(tag)
        return already_present

    def delete_tag_type(self, tag: Tag) -> None:
        """タグをカタログから削除し、保持者全員からも外す（カスケード削除）.

        メンバーリストの各人物に `remove_tag` を命じたあと、カタログの
        エントリとメンバーリストを破棄します。

        Raises:
            TagNotFoundError: タグがカタログに無い場合
        """
        members = self._members(tag)
        for person in list(members):
            person.remove_tag(tag)
        del self._tag_map[tag]
        logger.info(f"Deleted tag type {tag} (removed from {len(members)} person(s))")

    def delete_tag_types(self, tags: Iterable[Tag], *, atomic: bool = False) -> None:
        """複数のタグをカスケード削除する.

        トランザクションではありません。途中で TagNotFoundError になった場合、
        それ以前のタグの削除は残ります。atomic=True なら先に全タグの存在を
        確認し、欠落があれば何も削除せずに例外を送出します。

        Args:
            tags: 削除するタグ（重複は1回として扱う）
            atomic: 変更前に全タグを検証するか

        Raises:
            TagNotFoundError: カタログに無いタグが含まれる場合
        """
        to_delete = list(dict.fromkeys(tags))
        if atomic:
            for tag in to_delete:
                if not self.contains_tag(tag):
                    raise TagNotFoundError(tag)
        for tag in to_delete:
            self.delete_tag_type(tag)

    # ------------------------------------------------------------------
    # メンバー同期
    # ------------------------------------------------------------------

    def person_has_valid_tags(self, person: TagHolder) -> bool:
        """人物の全タグがカタログに存在するか.

        Raises:
            TagNotFoundError: STRICT で、カタログに無いタグを持つ場合
        """
        _require_person(person)
        for tag in person.tags:
            if tag not in self._tag_map:
                if self.is_strict:
                    raise TagNotFoundError(tag)
                return False
        return True

    def add_person_to_tags(self, person: TagHolder) -> set[Tag]:
        """人物を、その人物が持つ各タグのメンバーリストへ登録する.

        同一人物が既に登録されていれば、その位置のエントリを渡されたコピーで
        置き換えます（重複は作らない）。

        Args:
            person: 登録する人物

        Returns:
            カタログに無かったタグ（STRICT では常に空）

        Raises:
            TagNotFoundError: STRICT で、カタログに無いタグを持つ場合（何も変更しない）
        """
        _require_person(person)
        tags = person.tags
        missing = {tag for tag in tags if tag not in self._tag_map}
        if missing and self.is_strict:
            raise TagNotFoundError(min(missing, key=lambda t: t.name))

        for tag in tags:
            if tag in missing:
                continue
            members = self._tag_map[tag]
            pos = _find_member(members, person)
            if pos is None:
                members.append(person)
                logger.debug(f"Added {person} to tag {tag}")
            else:
                members[pos] = person
                logger.debug(f"Replaced {person} in tag {tag}")

        if missing:
            logger.warning(f"{person} references unknown tag(s): {format_tags(missing)}")
        return missing

    def remove_person_from_tag(self, tag: Tag, person: TagHolder) -> None:
        """1つのタグのメンバーリストから人物を外す.

        Raises:
            TagNotFoundError: タグがカタログに無い場合
            PersonNotFoundInTagError: STRICT で、人物がリストに居ない場合
        """
        _require_person(person)
        members = self._members(tag)
        pos = _find_member(members, person)
        if pos is None:
            if self.is_strict:
                raise PersonNotFoundInTagError(tag, person)
            logger.debug(f"{person} is not a member of tag {tag}; nothing to remove")
            return
        del members[pos]
        logger.debug(f"Removed {person} from tag {tag}")

    def remove_person_from_all_tags(self, person: TagHolder) -> None:
        """人物が持つ全タグのメンバーリストから人物を外す.

        人物の削除時や、編集済みコピーへの置き換え前に呼ばれます。
        カタログに無いタグとリストに居ない場合は無視する（何度呼んでも同じ結果）。
        """
        _require_person(person)
        for tag in person.tags:
            members = self._tag_map.get(tag)
            if members is None:
                continue
            pos = _find_member(members, person)
            if pos is not None:
                del members[pos]
                logger.debug(f"Removed {person} from tag {tag}")

    # ------------------------------------------------------------------
    # 一括置換
    # ------------------------------------------------------------------

    def set_tags(self, replacement: UniqueTagIndex) -> None:
        """現在の内容を破棄し、別インデックスの内容を丸ごと採用する.

        メンバーリストはコピーするので、以後 replacement を変更しても
        このインデックスには影響しません。
        """
        if replacement is None:
            raise TypeError("replacement must not be None")
        if replacement is self:
            return
        adopted = {tag: list(members) for tag, members in replacement._tag_map.items()}
        self._tag_map.clear()
        self._tag_map.update(adopted)
        logger.info(f"Replaced tag index contents ({len(adopted)} tag(s))")

    def copy(self) -> UniqueTagIndex:
        duplicate = UniqueTagIndex(policy=self.policy)
        duplicate.set_tags(self)
        return duplicate

    # ------------------------------------------------------------------
    # 参照
    # ------------------------------------------------------------------

    def get_tags(self) -> frozenset[Tag]:
        """カタログのスナップショット."""
        return frozenset(self._tag_map)

    def tags(self) -> tuple[Tag, ...]:
        """表示用のカタログ列挙（登録順）."""
        return tuple(self._tag_map)

    def persons_with_tag(self, tag: Tag) -> tuple[TagHolder, ...]:
        """タグのメンバーリストのスナップショット（登録順）.

        Raises:
            TagNotFoundError: タグがカタログに無い場合
        """
        return tuple(self._members(tag))

    def to_frame(self) -> pl.DataFrame:
        """メンバー表を DataFrame（tag, position, person）として返す.

        メンバーの居ないタグは行を持ちません。
        """
        rows = [
            {"tag": tag.name, "position": pos, "person": str(person)}
            for tag, members in self._tag_map.items()
            for pos, person in enumerate(members)
        ]
        return pl.DataFrame(
            rows,
            schema={"tag": pl.String, "position": pl.Int64, "person": pl.String},
        )

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, Tag) and tag in self._tag_map

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags())

    def __len__(self) -> int:
        return len(self._tag_map)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, UniqueTagIndex):
            return NotImplemented
        return self._tag_map == other._tag_map

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(
            f"{tag.name}: [{', '.join(str(p) for p in members)}]" for tag, members in self._tag_map.items()
        )
        return f"UniqueTagIndex(policy={self.policy.value}, {{{body}}})"
