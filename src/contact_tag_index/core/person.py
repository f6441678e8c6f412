"""人物エンティティとタグ保持者プロトコル.

インデックスが人物に要求するのは次の3点だけです。

- `is_same_person`: 同一人物判定（`==` の全フィールド比較とは別物）
- `tags`: 保持タグの参照
- `remove_tag`: カスケード削除時にインデックスから呼ばれる唯一の変更口
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from .tag import Tag


@runtime_checkable
class TagHolder(Protocol):
    """タグインデックスに登録できる人物の契約."""

    @property
    def tags(self) -> frozenset[Tag]:
        """保持しているタグ."""
        ...

    def is_same_person(self, other: Any) -> bool:
        """同じ実在人物を表すか（編集前後のコピー同士でも True）."""
        ...

    def remove_tag(self, tag: Tag) -> None:
        """タグを自分のタグ集合から外す."""
        ...


class Person:
    """アドレス帳の人物.

    同一人物判定は name + phone で行い、`==` は全フィールドで比較します。
    生成後のタグ集合の変更は `remove_tag` のみで、
    タグを付け替える場合は `with_tags` で編集済みコピーを作ります。
    """

    def __init__(
        self,
        name: str,
        phone: str,
        email: str = "",
        address: str = "",
        remark: str = "",
        tags: Iterable[Tag] = (),
    ) -> None:
        self.name = name
        self.phone = phone
        self.email = email
        self.address = address
        self.remark = remark
        self._tags: set[Tag] = set(tags)

    @property
    def tags(self) -> frozenset[Tag]:
        return frozenset(self._tags)

    def is_same_person(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, Person):
            return False
        return self.name == other.name and self.phone == other.phone

    def remove_tag(self, tag: Tag) -> None:
        self._tags.discard(tag)

    def edited(self, **changes: Any) -> Person:
        """フィールドを差し替えたコピーを返す.

        Args:
            **changes: name/phone/email/address/remark/tags のうち変更するもの

        Returns:
            新しい Person（元のインスタンスは変更しない）
        """
        values: dict[str, Any] = {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "remark": self.remark,
            "tags": self._tags,
        }
        unknown = set(changes) - set(values)
        if unknown:
            msg = f"Unknown Person fields: {sorted(unknown)}"
            raise TypeError(msg)
        values.update(changes)
        return Person(**values)

    def with_tags(self, tags: Iterable[Tag]) -> Person:
        return self.edited(tags=tags)

    def _key(self) -> tuple:
        return (self.name, self.phone, self.email, self.address, self.remark, frozenset(self._tags))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Person):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        tags = ", ".join(sorted(t.name for t in self._tags))
        return f"Person(name={self.name!r}, phone={self.phone!r}, tags=[{tags}])"
