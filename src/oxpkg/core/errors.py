"""Error taxonomy for package operations.

Every failure raised by the core is a subclass of `OxpkgError`. Each error is
local to a single operation: none of them leave a `Package` partially mutated.
Messages are stable and suitable for test assertions.
"""

from __future__ import annotations


class OxpkgError(Exception):
    """Base class for all package errors."""


class ArchiveFormatError(OxpkgError):
    """Archive bytes are corrupt or not a zip archive."""


class MissingContentTypes(ArchiveFormatError):
    """The archive decoded, but has no `/[Content_Types].xml` entry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"package has no {name} entry")
        self.name = name


class EntryNotFound(OxpkgError, KeyError):
    """A requested entry name is not present in the package."""

    def __init__(self, name: str) -> None:
        super().__init__(f"entry not found: {name}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class ProtectedEntryError(OxpkgError):
    """Attempt to remove or move the content-types entry."""

    def __init__(self, name: str, action: str = "remove") -> None:
        super().__init__(f"cannot {action} protected entry {name}")
        self.name = name
        self.action = action


class InvalidRelationshipFile(OxpkgError):
    """An entry at a relationship-file name cannot be read as relationships."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"invalid relationship file {name}: {reason}")
        self.name = name
        self.reason = reason


class CrossPackageRenameError(OxpkgError):
    """Rename source and target live in different packages."""

    def __init__(self, source_location: str, target_location: str) -> None:
        super().__init__(
            f"renames can only happen within one package: {source_location!r} -> {target_location!r}"
        )
        self.source_location = source_location
        self.target_location = target_location


class NotFound(OxpkgError):
    """A path matches no entry and no directory prefix."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"path not found: {path}")
        self.path = path


class NotADirectory(NotFound):
    """A directory listing was requested for a path that is a file."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"not a directory: {path}")


class PackageNotOpenError(OxpkgError):
    """A package location was used before being opened in the cache."""

    def __init__(self, location: str) -> None:
        super().__init__(f"package {location!r} has not been opened")
        self.location = location


class MoveIntoSelfError(OxpkgError, ValueError):
    """A directory rename whose destination lies inside the source directory."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"cannot move {source} into itself ({target})")
        self.source = source
        self.target = target
