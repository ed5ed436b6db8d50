"""Tabular views of a package (pandas).

Two canonical tables, with fixed column order for stable CSV export and
equality tests:

- entries: one row per entry, in package order
- relationships: one row per relationship record, across every `.rels` entry

Sizes and hashes refer to the save rendering, i.e. what `to_archive_bytes()`
writes.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING

from oxpkg.core.entries import Relationship
from oxpkg.core.package import Package

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd


INVENTORY_SCHEMAS: dict[str, dict[str, str]] = {
    "entries": {
        "name": "string",
        "kind": "string",
        "content_type": "string",
        "size": "Int64",
        "sha256": "string",
    },
    "relationships": {
        "source": "string",
        "id": "string",
        "type": "string",
        "target_name": "string",
        "external": "boolean",
    },
}

INVENTORY_COLUMN_ORDER: dict[str, list[str]] = {k: list(v) for k, v in INVENTORY_SCHEMAS.items()}


def sha256_bytes(b: bytes) -> str:
    """Return hex-encoded sha256 for bytes."""
    if not isinstance(b, (bytes, bytearray)):
        raise TypeError(f"sha256_bytes: expected bytes, got {type(b).__name__}")
    return hashlib.sha256(bytes(b)).hexdigest()


def _frame(table: str, rows: list[dict[str, object]]) -> "pd.DataFrame":
    import pandas as pd  # local import to keep module import-light

    columns = INVENTORY_COLUMN_ORDER[table]
    df = pd.DataFrame(rows, columns=columns)
    return df.astype(INVENTORY_SCHEMAS[table])


def entry_inventory(package: Package) -> "pd.DataFrame":
    rows: list[dict[str, object]] = []
    for entry in package.entries():
        data = entry.for_save()
        rows.append(
            {
                "name": entry.name,
                "kind": entry.kind.value,
                "content_type": package.content_types.content_type_of(entry.name),
                "size": len(data),
                "sha256": sha256_bytes(data),
            }
        )
    return _frame("entries", rows)


def relationships_table(package: Package) -> "pd.DataFrame":
    """Every readable relationship record; malformed `.rels` entries are skipped."""
    rows: list[dict[str, object]] = []
    for entry in package.entries():
        if not isinstance(entry, Relationship) or entry.error is not None:
            continue
        for rec in entry.records:
            rows.append(
                {
                    "source": entry.name,
                    "id": rec.id,
                    "type": rec.type,
                    "target_name": rec.target_name,
                    "external": rec.external,
                }
            )
    return _frame("relationships", rows)


def write_inventory_csv(path: Path, df: "pd.DataFrame") -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(p, index=False, lineterminator="\n")
