"""Tag index exceptions.

タグインデックスとアドレス帳が送出する例外クラスを定義します。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tag import Tag


class TagIndexError(Exception):
    """タグインデックス関連の例外の基底クラス."""


class TagNotFoundError(TagIndexError):
    """カタログに存在しないタグを参照した.

    Attributes:
        tag: 見つからなかったタグ
    """

    def __init__(self, tag: Tag) -> None:
        self.tag = tag
        super().__init__(f"Tag: {tag} does not exist.")


class PersonNotFoundInTagError(TagIndexError):
    """タグのメンバーリストに対象の人物がいない.

    Attributes:
        tag: 検索したタグ
        person: 見つからなかった人物
    """

    def __init__(self, tag: Tag, person: object) -> None:
        self.tag = tag
        self.person = person
        super().__init__(f"No such person in tag: {tag}")


class DuplicatePersonError(TagIndexError):
    """同一人物（is_same_person）が既にアドレス帳に存在する."""

    def __init__(self, person: object) -> None:
        self.person = person
        super().__init__(f"Person already exists in the address book: {person}")


class PersonNotFoundError(TagIndexError):
    """アドレス帳に対象の人物が存在しない."""

    def __init__(self, person: object) -> None:
        self.person = person
        super().__init__(f"Person not found in the address book: {person}")
