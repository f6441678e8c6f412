"""タグインデックスの健全性チェック.

アドレス帳とそのタグインデックスを突き合わせ、不変条件の破れを列挙します。

- duplicate_members: 1つのタグに同一人物が複数登録されている
- stale_members: メンバーリスト上の人物がそのタグを持っていない
- dangling_person_tags: 人物が持つタグがカタログに無い
- orphan_members: インデックスに居るがアドレス帳に居ない人物
- missing_members: カタログにあるタグを持つのに、そのメンバーリストに居ない人物
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import polars as pl
from loguru import logger

if TYPE_CHECKING:
    from contact_tag_index.address_book import AddressBook


@dataclass(frozen=True)
class MemberFinding:
    tag: str
    person: str


@dataclass
class IndexHealthReport:
    duplicate_members: list[MemberFinding] = field(default_factory=list)
    stale_members: list[MemberFinding] = field(default_factory=list)
    dangling_person_tags: list[MemberFinding] = field(default_factory=list)
    orphan_members: list[MemberFinding] = field(default_factory=list)
    missing_members: list[MemberFinding] = field(default_factory=list)

    @property
    def is_healthy(self) -> bool:
        return not any(self.as_dict().values())

    def as_dict(self) -> dict[str, list[MemberFinding]]:
        return {
            "duplicate_members": self.duplicate_members,
            "stale_members": self.stale_members,
            "dangling_person_tags": self.dangling_person_tags,
            "orphan_members": self.orphan_members,
            "missing_members": self.missing_members,
        }


def run_health_checks(book: AddressBook) -> IndexHealthReport:
    """アドレス帳のタグインデックスを検査する.

    Args:
        book: 検査対象のアドレス帳

    Returns:
        検出結果（問題が無ければ is_healthy が True）
    """
    index = book.tag_index
    persons = book.persons
    report = IndexHealthReport()

    for tag in index.tags():
        members = index.persons_with_tag(tag)
        for i, member in enumerate(members):
            if any(other.is_same_person(member) for other in members[:i]):
                report.duplicate_members.append(MemberFinding(tag.name, str(member)))
            if tag not in member.tags:
                report.stale_members.append(MemberFinding(tag.name, str(member)))
            if not any(p.is_same_person(member) for p in persons):
                report.orphan_members.append(MemberFinding(tag.name, str(member)))

    for person in persons:
        for tag in sorted(person.tags, key=lambda t: t.name):
            if not index.contains_tag(tag):
                report.dangling_person_tags.append(MemberFinding(tag.name, str(person)))
            elif not any(m.is_same_person(person) for m in index.persons_with_tag(tag)):
                report.missing_members.append(MemberFinding(tag.name, str(person)))

    for name, findings in report.as_dict().items():
        if findings:
            logger.warning(f"Tag index health: {len(findings)} {name}")
    return report


def export_health_report(
    report: IndexHealthReport,
    output_dir: Path | str,
) -> dict[str, Path | None]:
    """検出結果をCSVファイルとして出力する.

    Args:
        report: run_health_checks() の戻り値
        output_dir: 出力ディレクトリ

    Returns:
        出力したCSVのパス（検出が無ければ None）
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    result_paths: dict[str, Path | None] = {}
    for name, findings in report.as_dict().items():
        if not findings:
            result_paths[name] = None
            continue
        path = output_dir / f"{name}.csv"
        pl.DataFrame(
            {"tag": [f.tag for f in findings], "person": [f.person for f in findings]},
            schema={"tag": pl.String, "person": pl.String},
        ).write_csv(path)
        result_paths[name] = path

    return result_paths
