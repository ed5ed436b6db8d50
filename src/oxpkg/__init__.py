"""oxpkg: Office Open XML packages as a navigable, editable hierarchy.

- `oxpkg.core`: typed entries, the `Package` model, hierarchy queries, errors
- `oxpkg.codecs`: zip archive encode/decode
- `oxpkg.vfs`: package URIs, byte stores, the open-package cache and
  filesystem-shaped operations
- `oxpkg.io`: inventories (pandas) and unpacked-directory round trips
"""

from __future__ import annotations

from oxpkg.core import CONTENT_TYPES_NAME, Package, RelationshipRecord

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CONTENT_TYPES_NAME",
    "Package",
    "RelationshipRecord",
]
