"""タグインデックス設定（YAML）.

使用例:
    >>> config = load_config(Path("tag_index.yml"))
    >>> book = AddressBook.from_config(config, persons)

YAML形式:
    policy: strict          # strict / permissive（既定: permissive）
    atomic_bulk_delete: true  # 一括削除の前に全タグを検証する（既定: false）
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from contact_tag_index.core.tag_index import IntegrityPolicy

_KNOWN_KEYS = {"policy", "atomic_bulk_delete"}


@dataclass(frozen=True)
class TagIndexConfig:
    policy: IntegrityPolicy = IntegrityPolicy.PERMISSIVE
    atomic_bulk_delete: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TagIndexConfig:
        """辞書から設定を作る.

        Raises:
            ValueError: 未知のキー、または不正な値が含まれる場合
        """
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            msg = f"Unknown config key(s): {sorted(unknown)}. Valid keys: {sorted(_KNOWN_KEYS)}"
            raise ValueError(msg)

        policy_value = data.get("policy", IntegrityPolicy.PERMISSIVE.value)
        valid_policies = {p.value for p in IntegrityPolicy}
        if not isinstance(policy_value, str) or policy_value.lower() not in valid_policies:
            msg = f"Invalid policy {policy_value!r}. Valid policies: {sorted(valid_policies)}"
            raise ValueError(msg)

        atomic = data.get("atomic_bulk_delete", False)
        if not isinstance(atomic, bool):
            msg = f"atomic_bulk_delete must be a boolean, got {type(atomic).__name__}"
            raise ValueError(msg)

        return cls(policy=IntegrityPolicy(policy_value.lower()), atomic_bulk_delete=atomic)


def load_config(config_path: Path | str) -> TagIndexConfig:
    """YAMLファイルから設定を読み込む.

    空ファイルは既定値として扱います。

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: YAMLが不正、またはルートがマッピングでない場合
    """
    config_path = Path(config_path)
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {config_path}: {e}"
        raise ValueError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Config file must contain a YAML mapping: {config_path}"
        raise ValueError(msg)

    config = TagIndexConfig.from_dict(data)
    logger.info(f"Loaded tag index config from {config_path}: policy={config.policy.value}")
    return config
