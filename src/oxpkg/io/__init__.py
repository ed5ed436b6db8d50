"""oxpkg I/O helpers: tabular inventories and unpacked-directory round trips."""

from __future__ import annotations

from .inventory import entry_inventory, relationships_table, write_inventory_csv
from .unpacked import pack_directory, unpack_package

__all__ = [
    "entry_inventory",
    "relationships_table",
    "write_inventory_csv",
    "pack_directory",
    "unpack_package",
]
