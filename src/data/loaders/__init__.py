# Data Loaders
from .loot_loader import (
    DEFAULT_LOOT_TABLE,
    parse_loot_table,
    load_loot_table,
    get_loot_entry,
    get_skill_book_ids,
)

__all__ = [
    "DEFAULT_LOOT_TABLE",
    "parse_loot_table",
    "load_loot_table",
    "get_loot_entry",
    "get_skill_book_ids",
]
