"""アドレス帳のタグインデックス."""

from contact_tag_index.address_book import AddressBook
from contact_tag_index.config import TagIndexConfig, load_config
from contact_tag_index.core import IntegrityPolicy, Person, Tag, UniqueTagIndex

__version__ = "0.1.0"

__all__ = [
    "AddressBook",
    "IntegrityPolicy",
    "Person",
    "Tag",
    "TagIndexConfig",
    "UniqueTagIndex",
    "load_config",
]
