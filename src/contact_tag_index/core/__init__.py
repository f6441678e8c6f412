"""タグインデックスのコア.

- タグ値オブジェクトと人物プロトコル
- カタログ + メンバー表（UniqueTagIndex）
- 健全性チェック
"""

from .exceptions import (
    DuplicatePersonError,
    PersonNotFoundError,
    PersonNotFoundInTagError,
    TagIndexError,
    TagNotFoundError,
)
from .health import IndexHealthReport, export_health_report, run_health_checks
from .person import Person, TagHolder
from .tag import Tag, format_tags, is_valid_tag_name
from .tag_index import IntegrityPolicy, UniqueTagIndex

__all__ = [
    "Tag",
    "format_tags",
    "is_valid_tag_name",
    "Person",
    "TagHolder",
    "IntegrityPolicy",
    "UniqueTagIndex",
    "IndexHealthReport",
    "run_health_checks",
    "export_health_report",
    "TagIndexError",
    "TagNotFoundError",
    "PersonNotFoundInTagError",
    "DuplicatePersonError",
    "PersonNotFoundError",
]
