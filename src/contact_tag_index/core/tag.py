"""タグ値オブジェクト.

タグは名前だけで識別される不変の値です（大文字小文字は区別する）。
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_VALID_TAG_NAME = re.compile(r"^[A-Za-z0-9]+$")

MESSAGE_CONSTRAINTS = "Tag names should be alphanumeric"


def is_valid_tag_name(name: str) -> bool:
    """タグ名として使える文字列か判定する（ASCII英数字のみ）."""
    return bool(_VALID_TAG_NAME.match(name))


@dataclass(frozen=True)
class Tag:
    """名前で識別される不変のタグ.

    Attributes:
        name: 表示名（大文字小文字を区別）

    Examples:
        >>> Tag("friends") == Tag("friends")
        True
        >>> Tag("friends") == Tag("Friends")
        False
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            msg = f"Tag name must be str, got {type(self.name).__name__}"
            raise TypeError(msg)
        if not is_valid_tag_name(self.name):
            msg = f"{MESSAGE_CONSTRAINTS}: {self.name!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Tag({self.name!r})"


def format_tags(tags: Iterable[Tag]) -> str:
    """フィードバック表示用にタグ名を整形する（名前順・カンマ区切り）."""
    return ", ".join(sorted(tag.name for tag in tags))
