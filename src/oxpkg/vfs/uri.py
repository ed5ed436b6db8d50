"""Virtual identity of an entry: (package location, entry name) <-> URI string.

Format: `oxml://<percent-encoded location><entry name>`.

The location is encoded with no safe characters, so any `/`, `:`, `?`, `#` or
`%` inside it cannot be confused with the scheme's own delimiters, and
`PackageUri.parse(uri.to_uri()) == uri` holds for every location.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote

from oxpkg.core.paths import SEPARATOR, join, normalize_entry_name, parent_of

SCHEME = "oxml"
_PREFIX = f"{SCHEME}://"


@dataclass(frozen=True)
class PackageUri:
    location: str
    entry_name: str = SEPARATOR

    def __post_init__(self) -> None:
        if not isinstance(self.location, str) or not self.location:
            raise ValueError("PackageUri.location must be a non-empty string")
        object.__setattr__(self, "entry_name", normalize_entry_name(self.entry_name))

    @property
    def is_root(self) -> bool:
        return self.entry_name == SEPARATOR

    def to_uri(self) -> str:
        return f"{_PREFIX}{quote(self.location, safe='')}{self.entry_name}"

    @classmethod
    def parse(cls, uri: str) -> "PackageUri":
        if not uri.startswith(_PREFIX):
            raise ValueError(f"not an {SCHEME}:// URI: {uri!r}")
        rest = uri[len(_PREFIX):]
        authority, sep, path = rest.partition(SEPARATOR)
        if not authority:
            raise ValueError(f"missing package location in {uri!r}")
        return cls(location=unquote(authority), entry_name=sep + path)

    def joinpath(self, child: str) -> "PackageUri":
        return PackageUri(self.location, join(self.entry_name, child))

    def parent(self) -> "PackageUri | None":
        parent = parent_of(self.entry_name)
        if parent is None:
            return None
        return PackageUri(self.location, parent)

    def __str__(self) -> str:
        return self.to_uri()
